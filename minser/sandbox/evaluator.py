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

from __future__ import annotations

import ast
import sys
from collections.abc import Mapping
from types import CodeType
from typing import Any

from minser.sandbox.config import DEFAULT_CONFIG, SandboxConfig
from minser.sandbox.restrictions import verify_restrictions
from minser.sandbox.watchdog import StepWatchdog


class HostEvaluator:
    """Compiles and evaluates the Python expression produced by `minser.reader`.

    The expression is evaluated in a fresh namespace that holds only the decoder environment, with no builtins, and
    under a `StepWatchdog` when the configuration enables it.

    The watchdog is installed with `sys.settrace`, which is per thread. Evaluations in different threads are
    independent, but a load started from inside another load (for instance, by a function of the decoder environment)
    replaces the outer watchdog until it returns.
    """

    __slots__ = ('_config',)

    def __init__(self, config: SandboxConfig = DEFAULT_CONFIG) -> None:
        self._config = config

    @property
    def config(self) -> SandboxConfig:
        return self._config

    def compile(self, expression: str, /) -> CodeType:
        """Compile an expression into code that evaluates to the tuple of its values.

        An empty expression evaluates to the empty tuple. Raises `SyntaxError` or `ValueError` when the expression is
        not valid Python, and `SyntaxError` when it reads an attribute or a name forbidden by
        `minser.sandbox.restrictions`.
        """
        source = f'({expression},)' if expression else '()'
        tree = ast.parse(source, filename=self._config.filename, mode='eval')
        verify_restrictions(tree)
        return compile(
            source=tree,
            filename=self._config.filename,
            mode='eval',
            flags=0,
            dont_inherit=True,
            optimize=0,
        )

    def namespace(self, env: Mapping[str, Any] | None = None, /) -> dict[str, Any]:
        """Return the globals for one evaluation, they are never shared between evaluations."""
        namespace: dict[str, Any] = dict(env) if env else {}
        namespace.setdefault('__builtins__', {})
        return namespace

    def create_watchdog(self) -> StepWatchdog | None:
        if not self._config.is_enabled:
            return None
        return StepWatchdog(self._config)

    def evaluate(self, code: CodeType, namespace: dict[str, Any], watchdog: StepWatchdog | None = None) -> Any:
        """This is equivalent to `eval(code, namespace)` but interrupted by the watchdog, when there is one.

        The trace function active before the call is restored on every exit path.
        """
        if watchdog is None:
            return eval(code, namespace)
        # XXX: no Python-level calls between installing and removing the watchdog, they would be counted as steps
        previous = sys.gettrace()
        sys.settrace(watchdog.trace)
        try:
            return eval(code, namespace)
        finally:
            sys.settrace(previous)
