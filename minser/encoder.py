# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

r"""
This module implements the encoder, it turns values into the minser text.

Supported values are `None`, `bool`, `int`, `float`, `str` and composites. A composite is any mapping, `list` or
`tuple`, or an object that implements `__minser__`. Keys of composites can be `str`, `int`, `float` or `bool`.

Composites are written as `{...}`. The entries at the consecutive integer keys 1, 2, 3... are written positionally,
without their keys, until the first missing one. Lists and tuples are composites keyed by 1..N, and a `None` element
is a missing entry:

>>> dump([42, 'Hello!', None, 'blah']).unwrap()
'{42,"Hello!",[4]="blah"}'

All other entries are written as `key=value`, in the iteration order of the mapping:

>>> dump({'a': 1, 'true': True}).unwrap()
'{a=1,["true"]=true}'

Composites are not shared, a composite referenced more than once is written each time. A composite that contains
itself can't be encoded:

>>> loop = []
>>> loop.append(loop)
>>> dump(loop)
Err(CyclicReferenceError('circular reference'))

An object with a `__minser__(self, seen)` method takes over its own encoding. It must return a `Result` and it must
use `repr_value(sub_value, seen)` for the values it contains, passing along the `seen` set it was given, so that
cycles going through it are still detected.
"""

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Protocol, TypeAlias

from minser.exception import CyclicReferenceError, EncodeError, UnsupportedValueTypeError
from minser.keys import NIL, format_bool, format_number, quote_string, repr_key
from minser.utils.result import Err, Ok, Result, propagate_result

# Identities (`id()`) of the composites currently being encoded, that is, the active recursion stack.
Seen: TypeAlias = set[int]


class SupportsMinser(Protocol):
    def __minser__(self, seen: Seen, /) -> Result[str, EncodeError]:
        ...


@propagate_result
def dump(*values: Any) -> Result[str, EncodeError]:
    """Encode the values and join them with commas.

    Each value is encoded with its own `seen` set. The first value that fails makes the whole call fail.
    """
    return Ok(','.join(repr_value(value).unwrap_or_propagate() for value in values))


def repr_value(value: Any, seen: Seen | None = None) -> Result[str, EncodeError]:
    """Encode a single value.

    The `seen` set is meant for `__minser__` implementations, which must pass the set they received.
    """
    if seen is None:
        seen = set()
    return _repr_value(value, seen)


def is_composite(value: Any) -> bool:
    return isinstance(value, (Mapping, list, tuple)) or getattr(type(value), '__minser__', None) is not None


def _repr_value(value: Any, seen: Seen) -> Result[str, EncodeError]:
    if value is None:
        return Ok(NIL)
    # bool must come before int, it's a subclass
    if isinstance(value, bool):
        return Ok(format_bool(value))
    if isinstance(value, (int, float)):
        return Ok(format_number(value))
    if isinstance(value, str):
        return Ok(quote_string(value))
    if is_composite(value):
        return _repr_composite(value, seen)
    return Err(UnsupportedValueTypeError(type(value).__name__))


@propagate_result
def _repr_composite(composite: Any, seen: Seen) -> Result[str, EncodeError]:
    identity = id(composite)
    if identity in seen:
        return Err(CyclicReferenceError())
    seen.add(identity)
    try:
        hook = getattr(type(composite), '__minser__', None)
        if hook is not None:
            return hook(composite, seen)
        return Ok('{' + ','.join(_iter_fields(composite, seen)) + '}')
    finally:
        seen.discard(identity)


def _iter_fields(composite: Any, seen: Seen) -> Iterator[str]:
    """Yield the encoded fields of a composite, positional ones first.

    Must be consumed inside a `@propagate_result` function.
    """
    entries = list(_iter_entries(composite))
    indexed = {key: value for key, value in entries if _is_index(key)}

    length = 0
    while indexed.get(length + 1) is not None:
        length += 1
        yield _repr_value(indexed[length], seen).unwrap_or_propagate()

    for key, value in entries:
        if _is_index(key) and key <= length:
            continue
        key_repr = repr_key(key).unwrap_or_propagate()
        value_repr = _repr_value(value, seen).unwrap_or_propagate()
        yield f'{key_repr}={value_repr}'


def _iter_entries(composite: Any) -> Iterable[tuple[Any, Any]]:
    if isinstance(composite, Mapping):
        return composite.items()
    return ((index, value) for index, value in enumerate(composite, start=1) if value is not None)


def _is_index(key: Any) -> bool:
    """Whether the key is a positive integer. `True` is not, even though `True == 1`."""
    if isinstance(key, bool):
        return False
    if isinstance(key, float):
        return key.is_integer() and key >= 1
    return isinstance(key, int) and key >= 1
