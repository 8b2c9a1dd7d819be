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
This module implements the decoder, it turns minser text back into values by evaluating it.

>>> load('{42,"Hello!",[4]="blah"}, nil').unwrap()
Loaded(count=2, values=({1: 42, 2: 'Hello!', 4: 'blah'}, None))

Composites with only positional fields become lists, all others become dicts:

>>> load('{1,2,3}, {}, {x=1}').unwrap().values
([1, 2, 3], {}, {'x': 1})

The text is a Python expression in disguise, so it can use the names given in `env`, but nothing else:

>>> load('point(1, 2)', {'point': lambda x, y: {'x': x, 'y': y}}).unwrap().values
({'x': 1, 'y': 2},)
>>> load('open("/etc/passwd")')
Err(EvaluationError("name 'open' is not defined"))
"""

from collections.abc import Mapping
from typing import Any, NamedTuple

from structlog import get_logger

from minser.exception import (
    CompileError,
    DecodeError,
    EvaluationError,
    EvaluationTimeoutError,
    OutOfStepsError,
    ReaderError,
)
from minser.reader import to_python_expression
from minser.sandbox.config import DEFAULT_CONFIG, SandboxConfig
from minser.sandbox.evaluator import HostEvaluator
from minser.utils.result import Err, Ok, Result

logger = get_logger()


class Loaded(NamedTuple):
    """The values of a text, in order. `count` is the number of values."""
    count: int
    values: tuple[Any, ...]


def load(
    text: str,
    env: Mapping[str, Any] | None = None,
    *,
    config: SandboxConfig | None = None,
    evaluator: HostEvaluator | None = None,
) -> Result[Loaded, DecodeError]:
    """Decode the values of a text.

    Args:
        text: The minser text, zero or more comma-separated values. Blank text has zero values.
        env: Names visible to the text. It is copied, the text can't modify it. It has no builtins unless it binds
            `__builtins__`.
        config: Sandbox config for the default evaluator, ignored when `evaluator` is given.
        evaluator: Evaluator to use instead of `HostEvaluator(config)`.
    """
    if evaluator is None:
        evaluator = HostEvaluator(config if config is not None else DEFAULT_CONFIG)

    try:
        code = evaluator.compile(to_python_expression(text))
    except ReaderError as e:
        logger.debug('failed to read text', error=str(e))
        return Err(e)
    except (SyntaxError, ValueError) as e:
        logger.debug('failed to compile text', error=str(e))
        return Err(CompileError(str(e)))

    namespace = evaluator.namespace(env)
    watchdog = evaluator.create_watchdog()
    values: tuple[Any, ...] = ()
    fault: BaseException | None = None
    try:
        values = evaluator.evaluate(code, namespace, watchdog)
    except OutOfStepsError as e:
        fault = e
    except Exception as e:
        fault = e

    # the fault that surfaced may not be the interruption itself, or the evaluated code may have swallowed it
    if (watchdog is not None and watchdog.timed_out) or isinstance(fault, OutOfStepsError):
        logger.warning('evaluation ran out of steps', max_steps=evaluator.config.max_steps)
        return Err(EvaluationTimeoutError())
    if fault is not None:
        logger.debug('evaluation failed', error=repr(fault))
        return Err(EvaluationError(str(fault) or type(fault).__name__))

    return Ok(Loaded(len(values), values))
