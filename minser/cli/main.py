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

import os
import sys
from types import ModuleType
from typing import NamedTuple

from structlog import get_logger

logger = get_logger()


class Command(NamedTuple):
    group: str
    module: ModuleType
    description: str


class CliManager:
    """Dispatches `minser-cli <command> [options]` to the `main()` of the command module."""

    def __init__(self) -> None:
        self.basename: str = os.path.basename(sys.argv[0])
        self.commands: dict[str, Command] = {}

        from minser.cli import dump, load

        self.add_cmd('codec', 'dump', dump, 'Read JSON and print it as minser text')
        self.add_cmd('codec', 'load', load, 'Read minser text and print its values as JSON')

    def add_cmd(self, group: str, cmd: str, module: ModuleType, description: str = '') -> None:
        self.commands[cmd] = Command(group, module, description)

    def help(self) -> None:
        from colorama import Fore, Style

        width = max(map(len, self.commands), default=0)
        print()
        print('Available subcommands:')
        for group in sorted({command.group for command in self.commands.values()}):
            print()
            print(f'{Fore.RED}{Style.BRIGHT}[{group}]{Style.RESET_ALL}')
            for cmd, command in self.commands.items():
                if command.group == group:
                    print(f'    {cmd:<{width}}   {command.description}')
        print()

    def execute_from_command_line(self) -> int:
        from minser.cli.util import process_logging_options, process_logging_output, setup_logging

        if len(sys.argv) < 2 or sys.argv[1] in ('help', '--help', '-h'):
            self.help()
            return 0

        cmd = sys.argv.pop(1)
        command = self.commands.get(cmd)
        if command is None:
            print(f'Unknown command: "{cmd}"')
            print(f'Type "{self.basename} help" for usage.')
            return 2

        sys.argv[0] = f'{sys.argv[0]} {cmd}'
        setup_logging(
            logging_output=process_logging_output(sys.argv),
            logging_options=process_logging_options(sys.argv),
        )
        return command.module.main()


def main():
    try:
        sys.exit(CliManager().execute_from_command_line())
    except KeyboardInterrupt:
        logger.warning('Aborting and exiting...')
        sys.exit(1)
    except Exception:
        logger.exception('Uncaught exception:')
        sys.exit(2)


if __name__ == '__main__':
    main()
