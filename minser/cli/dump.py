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

"""Read JSON and print it as minser text."""

import json
import sys
from argparse import ArgumentParser, Namespace

from structlog import get_logger

logger = get_logger()


def create_parser() -> ArgumentParser:
    from minser.cli.util import create_parser
    parser = create_parser()
    parser.add_argument('--input', help='JSON file to read, defaults to stdin')
    parser.add_argument('--many', action='store_true',
                        help='The input is a JSON array, and each of its elements is a separate value')
    return parser


def execute(args: Namespace) -> int:
    from minser.cli.util import read_input
    from minser.encoder import dump

    try:
        data = json.loads(read_input(args.input))
    except OSError as e:
        print(f'error: {e}', file=sys.stderr)
        return 1
    except json.JSONDecodeError as e:
        print(f'error: invalid JSON: {e}', file=sys.stderr)
        return 1

    if args.many:
        if not isinstance(data, list):
            print('error: --many expects a JSON array', file=sys.stderr)
            return 1
        result = dump(*data)
    else:
        result = dump(data)

    if result.is_err():
        error = result.unwrap_err()
        logger.debug('failed to encode input', error=repr(error))
        print(f'error: {error}', file=sys.stderr)
        return 1

    print(result.unwrap())
    return 0


def main() -> int:
    parser = create_parser()
    args = parser.parse_args()
    return execute(args)
