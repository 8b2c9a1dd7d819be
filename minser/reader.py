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

"""
This module rewrites minser text into a Python expression, so it can be compiled and evaluated by the host.

Only the parts of the text that are not Python are rewritten:

- composites `{...}` become list displays when all their fields are positional, and dict displays otherwise, with the
  positional fields keyed by 1, 2, 3...;
- `nil`, `true` and `false` become `None`, `True` and `False`.

Everything else (numbers, strings, names bound by the decoder environment, calls, operators) is copied as is.

>>> to_python_expression('{42,"Hello!",[4]="blah"}')
'{(1): (42), (2): ("Hello!"), (4): ("blah")}'
>>> to_python_expression('{true,nil},point(1,2)')
'[(True), (None)] , point ( 1 , 2 )'
"""

import io
import tokenize
from tokenize import TokenInfo
from typing import Iterator

from minser.exception import ReaderError

LITERALS: dict[str, str] = {
    'nil': 'None',
    'true': 'True',
    'false': 'False',
}

_CLOSING: dict[str, str] = {'(': ')', '[': ']', '{': '}'}
_FIELD_END: tuple[str, ...] = (',', ';', '}')
_SKIPPED: frozenset[int] = frozenset({
    tokenize.COMMENT,
    tokenize.NL,
    tokenize.NEWLINE,
    tokenize.INDENT,
    tokenize.DEDENT,
    tokenize.ENCODING,
})

# A field of a composite, the key is `None` for positional fields.
_Field = tuple[str | None, str]


def to_python_expression(text: str) -> str:
    """Rewrite minser text into a Python expression, raises `ReaderError` if the text is not well-formed.

    Blank text gives an empty expression.
    """
    reader = _Reader(_tokenize(text))
    return reader.read_all()


def _tokenize(text: str) -> list[TokenInfo]:
    readline = io.StringIO(text).readline
    try:
        tokens = [token for token in tokenize.generate_tokens(readline) if token.type not in _SKIPPED]
    except (tokenize.TokenError, SyntaxError) as e:
        raise ReaderError(f'invalid text: {e}') from e
    for token in tokens:
        name = tokenize.tok_name[token.type]
        if token.type == tokenize.ERRORTOKEN:
            raise ReaderError(f'unexpected {token.string!r} at {_position(token)}')
        if name.startswith(('FSTRING', 'TSTRING')) or (token.type == tokenize.STRING and _is_template(token.string)):
            raise ReaderError(f'template strings are not supported, found at {_position(token)}')
    return tokens


def _is_template(string: str) -> bool:
    """Whether a string literal has an f or t prefix, older tokenizers give f-strings as a single STRING token."""
    prefix = string[:len(string) - len(string.lstrip('rRbBuUfFtT'))]
    return any(c in prefix for c in 'fFtT')


def _position(token: TokenInfo) -> str:
    line, column = token.start
    return f'line {line} column {column + 1}'


def _is_op(token: TokenInfo | None, *strings: str) -> bool:
    return token is not None and token.type == tokenize.OP and token.string in strings


class _Reader:
    __slots__ = ('_tokens', '_pos')

    def __init__(self, tokens: list[TokenInfo]) -> None:
        self._tokens = tokens
        self._pos = 0

    def _peek(self, offset: int = 0) -> TokenInfo | None:
        pos = self._pos + offset
        if pos >= len(self._tokens) or self._tokens[pos].type == tokenize.ENDMARKER:
            return None
        return self._tokens[pos]

    def _advance(self) -> TokenInfo:
        token = self._peek()
        if token is None:
            raise ReaderError('unexpected end of text')
        self._pos += 1
        return token

    def _expect(self, string: str, opening: TokenInfo) -> TokenInfo:
        token = self._peek()
        if not _is_op(token, string):
            found = 'end of text' if token is None else repr(token.string)
            raise ReaderError(f'expected {string!r} to match {opening.string!r} at {_position(opening)}, found {found}')
        return self._advance()

    def read_all(self) -> str:
        fragments = list(self._read_until(()))
        token = self._peek()
        if token is not None:
            raise ReaderError(f'unexpected {token.string!r} at {_position(token)}')
        return ' '.join(fragments)

    def _read_until(self, stops: tuple[str, ...]) -> Iterator[str]:
        """Yield the rewritten fragments until one of `stops` is found at this nesting level. It is not consumed."""
        previous: TokenInfo | None = None
        while (token := self._peek()) is not None:
            if _is_op(token, *stops):
                return
            self._advance()
            match token.type, token.string:
                case tokenize.OP, '{':
                    yield self._read_composite(token)
                case tokenize.OP, '(' | '[':
                    closing = _CLOSING[token.string]
                    yield token.string
                    yield from self._read_until((closing,))
                    yield self._expect(closing, token).string
                case tokenize.OP, ')' | ']' | '}':
                    raise ReaderError(f'unexpected {token.string!r} at {_position(token)}')
                case tokenize.NAME, name if name in LITERALS and not _is_op(previous, '.'):
                    yield LITERALS[name]
                case _:
                    yield token.string
            previous = token

    def _read_composite(self, opening: TokenInfo) -> str:
        fields: list[_Field] = []
        while not _is_op(self._peek(), '}'):
            if self._peek() is None:
                raise ReaderError(f'unclosed {opening.string!r} at {_position(opening)}')
            fields.append(self._read_field())
            if _is_op(self._peek(), ',', ';'):
                self._advance()
        self._expect('}', opening)
        return _build_composite(fields)

    def _read_field(self) -> _Field:
        token = self._advance()
        if _is_op(token, '['):
            key = ' '.join(self._read_until((']',)))
            self._expect(']', token)
            if not key:
                raise ReaderError(f'empty key at {_position(token)}')
            self._expect('=', token)
            return key, self._read_value(token)
        if token.type == tokenize.NAME and _is_op(self._peek(), '='):
            self._advance()
            return repr(token.string), self._read_value(token)
        # positional field, the token is part of the value
        self._pos -= 1
        return None, self._read_value(token)

    def _read_value(self, start: TokenInfo) -> str:
        value = ' '.join(self._read_until(_FIELD_END))
        if not value:
            raise ReaderError(f'missing value at {_position(start)}')
        return value


def _build_composite(fields: list[_Field]) -> str:
    if fields and all(key is None for key, _ in fields):
        return '[' + ', '.join(f'({value})' for _, value in fields) + ']'
    entries = []
    index = 0
    for key, value in fields:
        if key is None:
            index += 1
            key = str(index)
        entries.append(f'({key}): ({value})')
    return '{' + ', '.join(entries) + '}'
