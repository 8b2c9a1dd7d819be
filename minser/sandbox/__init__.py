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

"""Evaluation of decoded text: host evaluator, step watchdog and their configuration."""

from minser.sandbox.config import DEFAULT_CONFIG, DISABLED_CONFIG, SandboxConfig
from minser.sandbox.config_loader import SandboxConfigLoader
from minser.sandbox.evaluator import HostEvaluator
from minser.sandbox.watchdog import StepWatchdog

__all__ = [
    'DEFAULT_CONFIG',
    'DISABLED_CONFIG',
    'HostEvaluator',
    'SandboxConfig',
    'SandboxConfigLoader',
    'StepWatchdog',
]
