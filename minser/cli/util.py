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

"""Helpers shared by the `minser-cli` subcommands: argument parsing, input reading and logging setup."""

import logging
import logging.config
import sys
from argparse import ArgumentParser
from collections import OrderedDict
from enum import IntEnum, auto
from typing import Any, NamedTuple

import configargparse
import structlog
from typing_extensions import assert_never

ENV_VAR_PREFIX = 'minser_'

# every log line has these, whether it comes from structlog or from a stdlib logger
TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'


def create_parser(*, add_help: bool = True) -> ArgumentParser:
    """Parser whose options can also be given as `MINSER_<OPTION>` environment variables."""
    return configargparse.ArgumentParser(auto_env_var_prefix=ENV_VAR_PREFIX, add_help=add_help)


def read_input(path: str | None) -> str:
    """Read the whole input file, or stdin when there is no path."""
    if path is None or path == '-':
        return sys.stdin.read()
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


class LoggingOutput(IntEnum):
    NULL = auto()
    PRETTY = auto()
    JSON = auto()


class LoggingOptions(NamedTuple):
    debug: bool


def _extract_flags(argv: list[str], *flags: str, exclusive: bool = False) -> dict[str, bool]:
    """Remove `flags` from `argv` in place and return which of them were given, keyed by destination name."""
    parser = create_parser(add_help=False)
    group: Any = parser.add_mutually_exclusive_group() if exclusive else parser
    for flag in flags:
        group.add_argument(flag, action='store_true')
    args, remaining_argv = parser.parse_known_args(argv)
    argv[:] = remaining_argv
    return vars(args)


def process_logging_output(argv: list[str]) -> LoggingOutput:
    """Extract `--json-logs` and `--disable-logs` before the subcommand parses `argv`."""
    flags = _extract_flags(argv, '--json-logs', '--disable-logs', exclusive=True)
    if flags['json_logs']:
        return LoggingOutput.JSON
    if flags['disable_logs']:
        return LoggingOutput.NULL
    return LoggingOutput.PRETTY


def process_logging_options(argv: list[str]) -> LoggingOptions:
    """Extract `--debug` before the subcommand parses `argv`."""
    flags = _extract_flags(argv, '--debug')
    return LoggingOptions(debug=flags['debug'])


def get_level_styles() -> dict[str, str]:
    import colorama
    return {
        'critical': colorama.Style.BRIGHT + colorama.Fore.RED,
        'exception': colorama.Fore.RED,
        'error': colorama.Fore.RED,
        'warn': colorama.Fore.YELLOW,
        'warning': colorama.Fore.YELLOW,
        'info': colorama.Fore.GREEN,
        'debug': colorama.Style.BRIGHT + colorama.Fore.CYAN,
        'notset': colorama.Back.RED,
    }


def _handler_name(logging_output: LoggingOutput) -> str:
    match logging_output:
        case LoggingOutput.NULL:
            return 'null'
        case LoggingOutput.PRETTY:
            return 'pretty'
        case LoggingOutput.JSON:
            return 'json'
        case _:
            assert_never(logging_output)


def _formatter(renderer: Any, pre_chain: list[Any]) -> dict[str, Any]:
    return {
        '()': structlog.stdlib.ProcessorFormatter,
        'processor': renderer,
        'foreign_pre_chain': pre_chain,
    }


def setup_logging(
    *,
    logging_output: LoggingOutput,
    logging_options: LoggingOptions,
) -> None:
    """Route structlog through the stdlib logging.

    Logs always go to stderr, stdout carries the output of the subcommand.
    """
    timestamper = structlog.processors.TimeStamper(fmt=TIMESTAMP_FORMAT)
    # for records that come from stdlib loggers
    pre_chain = [structlog.stdlib.add_log_level, structlog.stdlib.add_logger_name, timestamper]

    # See: https://docs.python.org/3/library/logging.config.html#configuration-dictionary-schema
    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'colored': _formatter(structlog.dev.ConsoleRenderer(colors=True, level_styles=get_level_styles()), pre_chain),
            'json': _formatter(structlog.processors.JSONRenderer(), pre_chain),
        },
        'handlers': {
            'pretty': {'class': 'logging.StreamHandler', 'stream': 'ext://sys.stderr', 'formatter': 'colored'},
            'json': {'class': 'logging.StreamHandler', 'stream': 'ext://sys.stderr', 'formatter': 'json'},
            'null': {'class': 'logging.NullHandler'},
        },
        'root': {
            'handlers': [_handler_name(logging_output)],
            'level': 'DEBUG' if logging_options.debug else 'INFO',
        },
    })

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            timestamper,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=OrderedDict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
