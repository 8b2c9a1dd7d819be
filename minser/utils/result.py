#  Copyright 2025 Hathor Labs
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#  http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.

"""
Tagged results for operations that can fail in expected ways.

`Ok(value)` carries a success, `Err(error)` a failure. Inside a function decorated with `@propagate_result`, calling
`unwrap_or_propagate()` on an `Err` makes the function return that `Err` right away:

>>> @propagate_result
... def double_first(items: list[int]) -> Result[int, str]:
...     first = (Ok(items[0]) if items else Err('empty')).unwrap_or_propagate()
...     return Ok(first * 2)
>>> double_first([21])
Ok(42)
>>> double_first([])
Err('empty')
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Final, Generic, Literal, NoReturn, ParamSpec, TypeAlias, TypeVar

from typing_extensions import TypeIs

T = TypeVar('T', covariant=True)  # Success type
E = TypeVar('E', covariant=True)  # Error type
U = TypeVar('U')
F = TypeVar('F')
P = ParamSpec('P')


class Ok(Generic[T]):
    """A successful result holding `value`."""

    __slots__ = ('_value',)
    __match_args__ = ('_value',)

    def __init__(self, value: T) -> None:
        self._value = value

    def __repr__(self) -> str:
        return f'Ok({self._value!r})'

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Ok) and self._value == other._value

    def __hash__(self) -> int:
        return hash((Ok, self._value))

    def is_ok(self) -> Literal[True]:
        return True

    def is_err(self) -> Literal[False]:
        return False

    def ok(self) -> T:
        return self._value

    def err(self) -> None:
        return None

    def unwrap(self) -> T:
        return self._value

    def unwrap_err(self) -> NoReturn:
        raise UnwrapError(self, f'unwrap_err() called on {self!r}')

    def unwrap_or(self, _default: Any) -> T:
        return self._value

    def unwrap_or_raise(self) -> T:
        return self._value

    def unwrap_or_propagate(self) -> T:
        return self._value

    def map(self, op: Callable[[T], U]) -> Ok[U]:
        return Ok(op(self._value))

    def map_err(self, _op: Callable[[Any], Any]) -> Ok[T]:
        return self

    def and_then(self, op: Callable[[T], Result[U, F]]) -> Result[U, F]:
        return op(self._value)


class Err(Generic[E]):
    """A failed result holding `error`, usually an exception instance that is never raised."""

    __slots__ = ('_value',)
    __match_args__ = ('_value',)

    def __init__(self, error: E) -> None:
        self._value = error

    def __repr__(self) -> str:
        return f'Err({self._value!r})'

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Err) and self._value == other._value

    def __hash__(self) -> int:
        return hash((Err, self._value))

    def is_ok(self) -> Literal[False]:
        return False

    def is_err(self) -> Literal[True]:
        return True

    def ok(self) -> None:
        return None

    def err(self) -> E:
        return self._value

    def unwrap(self) -> NoReturn:
        """Raise `UnwrapError`, with the error as its cause when the error is an exception."""
        exc = UnwrapError(self, f'unwrap() called on {self!r}')
        if isinstance(self._value, BaseException):
            raise exc from self._value
        raise exc

    def unwrap_err(self) -> E:
        return self._value

    def unwrap_or(self, default: U) -> U:
        return default

    def unwrap_or_raise(self) -> NoReturn:
        """Raise the error itself, it must be an exception."""
        assert isinstance(self._value, Exception), f'unwrap_or_raise() called on a non-exception: {self._value!r}'
        raise self._value

    def unwrap_or_propagate(self) -> NoReturn:
        """Make the enclosing `@propagate_result` function return this `Err`."""
        raise _Propagation(self)

    def map(self, _op: Callable[[Any], Any]) -> Err[E]:
        return self

    def map_err(self, op: Callable[[E], F]) -> Err[F]:
        return Err(op(self._value))

    def and_then(self, _op: Callable[[Any], Any]) -> Err[E]:
        return self


Result: TypeAlias = Ok[T] | Err[E]

# For `isinstance` checks.
OkErr: Final = (Ok, Err)


class UnwrapError(Exception):
    """Raised by the `unwrap*` methods called on the wrong variant. The result is kept in `.result`."""

    def __init__(self, result: Result[Any, Any], message: str) -> None:
        super().__init__(message)
        self._result = result

    @property
    def result(self) -> Result[Any, Any]:
        return self._result


# BaseException, so `except Exception` blocks between `unwrap_or_propagate()` and the decorator let it through
class _Propagation(BaseException):
    def __init__(self, err: Err[Any]) -> None:
        super().__init__('unwrap_or_propagate() used outside of a @propagate_result function')
        self.err = err


def propagate_result(f: Callable[P, Result[T, E]]) -> Callable[P, Result[T, E]]:
    """Decorator that lets `f` use `unwrap_or_propagate()`."""
    @functools.wraps(f)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result[T, E]:
        try:
            return f(*args, **kwargs)
        except _Propagation as e:
            return e.err

    return wrapper


def is_ok(result: Result[T, E]) -> TypeIs[Ok[T]]:
    return result.is_ok()


def is_err(result: Result[T, E]) -> TypeIs[Err[E]]:
    return result.is_err()
