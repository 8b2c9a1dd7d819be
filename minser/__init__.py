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

"""Minimal serializer: values to a compact textual format, and back by sandboxed evaluation."""

from minser.decoder import Loaded, load
from minser.encoder import Seen, SupportsMinser, dump, repr_value
from minser.exception import (
    CompileError,
    CyclicReferenceError,
    DecodeError,
    EncodeError,
    EvaluationError,
    EvaluationTimeoutError,
    MinserError,
    ReaderError,
    UnsupportedKeyTypeError,
    UnsupportedTypeError,
    UnsupportedValueTypeError,
)
from minser.utils.result import Err, Ok, Result
from minser.version import __version__

# `minser.repr(value, seen)` is the name used by `__minser__` implementations
repr = repr_value  # noqa: A001

__all__ = [
    'CompileError',
    'CyclicReferenceError',
    'DecodeError',
    'EncodeError',
    'Err',
    'EvaluationError',
    'EvaluationTimeoutError',
    'Loaded',
    'MinserError',
    'Ok',
    'ReaderError',
    'Result',
    'Seen',
    'SupportsMinser',
    'UnsupportedKeyTypeError',
    'UnsupportedTypeError',
    'UnsupportedValueTypeError',
    '__version__',
    'dump',
    'load',
    'repr',
    'repr_value',
]
