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

"""Sandbox configuration for evaluating minser text."""

from __future__ import annotations

from dataclasses import dataclass

from minser.sandbox.constants import DEFAULT_MAX_STEPS, MINSER_FILENAME


@dataclass(frozen=True)
class SandboxConfig:
    """Immutable configuration for the decoder sandbox.

    Attributes:
        enabled: Whether the step watchdog is installed. When False, evaluation is unbounded.
        max_steps: Number of evaluated steps after which the evaluation is interrupted.
        count_opcodes: Count every executed opcode as a step, on top of the executed source lines. When False, only
            lines are counted, which is coarser and cheaper.
        filename: Filename given to the compiled text.
    """

    enabled: bool = True
    max_steps: int = DEFAULT_MAX_STEPS
    count_opcodes: bool = True
    filename: str = MINSER_FILENAME

    def __post_init__(self) -> None:
        if self.max_steps < 0:
            raise ValueError(f'max_steps must not be negative, got {self.max_steps}')

    @property
    def is_enabled(self) -> bool:
        return self.enabled


# Disabled configuration singleton (Null Object pattern)
# Use this instead of None to indicate the watchdog is disabled
DISABLED_CONFIG = SandboxConfig(enabled=False)

DEFAULT_CONFIG = SandboxConfig()
