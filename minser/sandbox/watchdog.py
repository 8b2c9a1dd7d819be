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
Step watchdog for the evaluation of minser text.

The watchdog is a trace function (see `sys.settrace`). Every Python frame created while it is installed is traced,
including frames of functions that the evaluated text calls through the decoder environment, and each traced opcode
and line (see `SandboxConfig.count_opcodes`) is one step. When the steps exceed the configured maximum, the watchdog
raises `OutOfStepsError` from inside the evaluated frame. CPython removes a trace function that raises, so the
watchdog fires at most once.

Code running in C (builtins, extension modules) is not traced and can't be interrupted.
"""

from __future__ import annotations

from types import FrameType
from typing import Any, Callable, Optional

from minser.exception import OutOfStepsError
from minser.sandbox.config import SandboxConfig

TraceFunction = Callable[[FrameType, str, Any], Optional['TraceFunction']]


class StepWatchdog:
    __slots__ = ('_config', '_steps', '_timed_out')

    def __init__(self, config: SandboxConfig) -> None:
        self._config = config
        self._steps = 0
        self._timed_out = False

    @property
    def steps(self) -> int:
        """Number of steps counted so far."""
        return self._steps

    @property
    def timed_out(self) -> bool:
        """Whether the watchdog interrupted the evaluation. Stays True even if the interruption was caught."""
        return self._timed_out

    def trace(self, frame: FrameType, event: str, arg: Any) -> TraceFunction | None:
        """Global trace function, to be installed with `sys.settrace`. Called on every new frame."""
        if self._timed_out:
            return None
        if self._config.count_opcodes:
            frame.f_trace_opcodes = True
        return self._trace_step

    def _trace_step(self, frame: FrameType, event: str, arg: Any) -> TraceFunction | None:
        if event == 'opcode' or event == 'line':
            self._step()
        return self._trace_step

    def _step(self) -> None:
        self._steps += 1
        if self._steps > self._config.max_steps:
            self._timed_out = True
            raise OutOfStepsError(f'evaluation exceeded {self._config.max_steps} steps')
