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

import math

import pytest

from minser.exception import UnsupportedKeyTypeError
from minser.keys import RESERVED_WORDS, format_number, is_identifier, quote_string, repr_key
from minser.utils.result import Err, Ok


@pytest.mark.parametrize('value, expected', [
    ('', '""'),
    ('plain', '"plain"'),
    ('a"b\\c', '"a\\"b\\\\c"'),
    ('tab\there', '"tab\\there"'),
    ('two\nlines\r', '"two\\nlines\\r"'),
    ('\x00\x1f\x7f', '"\\x00\\x1f\\x7f"'),
    ('\u2028\u2029\x85', '"\\u2028\\u2029\\x85"'),
    ('ünïcode ☃', '"ünïcode ☃"'),
    ('\ud800', '"\\ud800"'),
    ('a\udfffb', '"a\\udfffb"'),
])
def test_quote_string(value, expected):
    assert quote_string(value) == expected


def test_quoted_strings_fit_in_one_line():
    quoted = quote_string(''.join(map(chr, range(0x100))) + '\u2028\u2029')
    assert quoted.splitlines() == [quoted]


@pytest.mark.parametrize('value, expected', [
    (0, '0'),
    (-7, '-7'),
    (2**70, '1180591620717411303424'),
    (1.5, '1.5'),
    (0.1, '0.1'),
    (2.0, '2.0'),
    (1e100, '1e+100'),
    (-0.0, '-0.0'),
    (math.inf, '1e999'),
    (-math.inf, '-1e999'),
    (math.nan, '(1e999-1e999)'),
])
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_quoted_strings_are_utf8_encodable():
    quote_string('\ud800 \U0010fc00 \udfff').encode('utf-8')


@pytest.mark.parametrize('value', [10**5000, -(10**5000)], ids=['positive', 'negative'])
def test_format_huge_int(value):
    text = format_number(value)
    assert text == hex(value)
    assert eval(text, {'__builtins__': {}}) == value


def test_format_number_evaluates_back():
    for value in (0.1, 1 / 3, 1e-300, 123456789.125, math.inf, -math.inf):
        assert float(eval(format_number(value), {'__builtins__': {}})) == value
    assert math.isnan(eval(format_number(math.nan), {'__builtins__': {}}))


@pytest.mark.parametrize('key', ['a', '_', '_private', 'snake_case', 'x1', 'CamelCase', 'None', 'class'])
def test_is_identifier(key):
    assert is_identifier(key)


@pytest.mark.parametrize('key', ['', '1st', 'a-b', 'a b', 'é', 'a.b', *sorted(RESERVED_WORDS)])
def test_is_not_identifier(key):
    assert not is_identifier(key)


@pytest.mark.parametrize('key, expected', [
    ('name', 'name'),
    ('true', '["true"]'),
    ('end', '["end"]'),
    ('with space', '["with space"]'),
    ('new\nline', '["new\\nline"]'),
    (7, '[7]'),
    (-1, '[-1]'),
    (1.5, '[1.5]'),
    (math.inf, '[1e999]'),
    (True, '[true]'),
    (False, '[false]'),
])
def test_repr_key(key, expected):
    assert repr_key(key) == Ok(expected)


@pytest.mark.parametrize('key, type_name', [
    ((1, 2), 'tuple'),
    (None, 'NoneType'),
    (b'bytes', 'bytes'),
    (frozenset(), 'frozenset'),
])
def test_repr_key_unsupported(key, type_name):
    result = repr_key(key)
    assert result == Err(UnsupportedKeyTypeError(type_name))
    assert result.unwrap_err().type_name == type_name
    assert str(result.unwrap_err()) == f'unsupported key type: {type_name}'
