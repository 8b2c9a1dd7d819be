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
This module contains the errors reported by the codec.

Public operations never raise these: they are returned wrapped in an `Err` (see `minser.utils.result`), so callers
can decide how to react without try/except around every call.

There is one exception type that is NOT part of this hierarchy, `OutOfStepsError`. It inherits from `BaseException`
so that it passes through `except Exception` blocks of caller-supplied code running inside the decoder, and it never
reaches the caller: the decoder converts it into `EvaluationTimeoutError`.
"""


class MinserError(Exception):
    """Base class for all codec errors.

    Two errors are equal when they have the same type and the same arguments, which makes `Err` results comparable.
    """

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.args == other.args  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class EncodeError(MinserError):
    """Base class for errors detected while encoding."""


class UnsupportedTypeError(EncodeError):
    """Raised when a key or a value is of a kind that cannot be encoded."""

    kind: str = 'value'

    def __init__(self, type_name: str) -> None:
        super().__init__(f'unsupported {self.kind} type: {type_name}')
        self.type_name = type_name


class UnsupportedKeyTypeError(UnsupportedTypeError):
    kind = 'key'


class UnsupportedValueTypeError(UnsupportedTypeError):
    kind = 'value'


class CyclicReferenceError(EncodeError):
    """Raised when a composite contains itself, directly or through other composites."""

    def __init__(self, message: str = 'circular reference') -> None:
        super().__init__(message)


class DecodeError(MinserError):
    """Base class for errors detected while decoding."""


class CompileError(DecodeError):
    """Raised when the text cannot be turned into an executable expression. Nothing was executed."""


class ReaderError(CompileError):
    """Raised when the text is not well-formed minser text."""


class EvaluationError(DecodeError):
    """Raised when evaluating the text faulted. The message is the fault's message."""


class EvaluationTimeoutError(DecodeError):
    """Raised when evaluating the text ran out of steps."""

    def __init__(self, message: str = 'timeout') -> None:
        super().__init__(message)


class OutOfStepsError(BaseException):
    """Injected into the evaluated code by the step watchdog when the step limit is exceeded."""
