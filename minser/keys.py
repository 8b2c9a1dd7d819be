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
Rendering of the scalar pieces of the minser text: numbers, strings and composite keys.

Strings are double-quoted and never contain a literal line break:

>>> quote_string('two\nlines\r')
'"two\\nlines\\r"'

Keys that are valid identifiers are written bare, everything else goes between brackets:

>>> [repr_key(k).unwrap() for k in ('name', 'true', '1st', 7, 1.5, False)]
['name', '["true"]', '["1st"]', '[7]', '[1.5]', '[false]']
"""

import math
import re
from typing import Any

from minser.exception import EncodeError, UnsupportedKeyTypeError
from minser.utils.result import Err, Ok, Result

# Words that can't be used as bare keys, they are the keywords of the textual format.
RESERVED_WORDS: frozenset[str] = frozenset({
    'and', 'break', 'do', 'else', 'elseif', 'end', 'false', 'for',
    'function', 'goto', 'if', 'in', 'local', 'nil', 'not', 'or',
    'repeat', 'return', 'then', 'true', 'until', 'while',
})

NIL = 'nil'
TRUE = 'true'
FALSE = 'false'

# `1e999` overflows to infinity when parsed, and `inf - inf` is NaN.
INFINITY = '1e999'
NAN = '(1e999-1e999)'

_IDENTIFIER_RE = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')

# C0 controls and DEL are written as hex escapes, some of them get a shorter form below.
_STRING_ESCAPES: dict[int, str] = {code: f'\\x{code:02x}' for code in (*range(0x20), 0x7f)}
_STRING_ESCAPES.update({
    ord('\\'): '\\\\',
    ord('"'): '\\"',
    ord('\n'): '\\n',
    ord('\r'): '\\r',
    ord('\t'): '\\t',
    # these are line boundaries for str.splitlines()
    0x85: '\\x85',
    0x2028: '\\u2028',
    0x2029: '\\u2029',
})
# lone surrogates can't be encoded to UTF-8, the text must stay encodable
_STRING_ESCAPES.update({code: f'\\u{code:04x}' for code in range(0xd800, 0xe000)})


def is_identifier(key: str) -> bool:
    """Whether a string key can be written without brackets and quotes.

    Only ASCII letters, digits and underscores are considered, so the result does not depend on the locale.
    """
    return _IDENTIFIER_RE.fullmatch(key) is not None and key not in RESERVED_WORDS


def quote_string(value: str) -> str:
    """Return `value` as a double-quoted literal with `\\n` and `\\r` escaped, so it always fits in one line."""
    return '"' + value.translate(_STRING_ESCAPES) + '"'


def format_number(value: int | float) -> str:
    """Return a numeric literal that evaluates back to `value`."""
    if isinstance(value, float):
        if math.isnan(value):
            return NAN
        if math.isinf(value):
            return INFINITY if value > 0 else '-' + INFINITY
        return repr(float(value))
    value = int(value)
    try:
        return str(value)
    except ValueError:
        # over sys.get_int_max_str_digits(), the limit does not apply to power-of-two bases
        return hex(value)


def format_bool(value: bool) -> str:
    return TRUE if value else FALSE


def repr_key(key: Any) -> Result[str, EncodeError]:
    """Return the representation of a composite key, without the trailing `=`."""
    # bool must come before int, it's a subclass
    if isinstance(key, bool):
        return Ok(f'[{format_bool(key)}]')
    if isinstance(key, str):
        if is_identifier(key):
            return Ok(key)
        return Ok(f'[{quote_string(key)}]')
    if isinstance(key, (int, float)):
        return Ok(f'[{format_number(key)}]')
    return Err(UnsupportedKeyTypeError(type(key).__name__))
