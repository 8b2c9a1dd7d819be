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

"""Read minser text and print its values as a JSON array."""

import dataclasses
import json
import sys
from argparse import ArgumentParser, Namespace

from structlog import get_logger

logger = get_logger()


def create_parser() -> ArgumentParser:
    from minser.cli.util import create_parser
    parser = create_parser()
    parser.add_argument('--input', help='Text file to read, defaults to stdin')
    parser.add_argument('--config', help='YAML file with a `decoder` section')
    parser.add_argument('--max-steps', type=int, help='Override the step limit of the config')
    parser.add_argument('--no-watchdog', action='store_true', help='Evaluate without the step limit')
    return parser


def execute(args: Namespace) -> int:
    from minser.cli.util import read_input
    from minser.decoder import load
    from minser.sandbox import DISABLED_CONFIG, SandboxConfigLoader

    config = SandboxConfigLoader(config_file=args.config).config
    if args.max_steps is not None:
        if args.max_steps < 0:
            print('error: --max-steps must not be negative', file=sys.stderr)
            return 1
        config = dataclasses.replace(config, max_steps=args.max_steps)
    if args.no_watchdog:
        config = DISABLED_CONFIG

    try:
        text = read_input(args.input)
    except OSError as e:
        print(f'error: {e}', file=sys.stderr)
        return 1

    result = load(text, config=config)
    if result.is_err():
        print(f'error: {result.unwrap_err()}', file=sys.stderr)
        return 1

    loaded = result.unwrap()
    logger.debug('text loaded', count=loaded.count)
    print(json.dumps(list(loaded.values)))
    return 0


def main() -> int:
    parser = create_parser()
    args = parser.parse_args()
    return execute(args)
