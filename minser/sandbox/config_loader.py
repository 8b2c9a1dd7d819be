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

"""Loading of the decoder sandbox configuration from YAML files.

The file holds a `decoder` section, every field of it is optional:

    decoder:
      enabled: true
      max_steps: 50000
      count_opcodes: false

A missing or invalid file never breaks decoding: the loader logs the problem and uses the default config.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import pydantic
import yaml
from structlog import get_logger

from minser.sandbox.config import DEFAULT_CONFIG, DISABLED_CONFIG, SandboxConfig

logger = get_logger()

NonNegativeInt = Annotated[int, pydantic.Field(ge=0, strict=True)]

CONFIG_SECTION = 'decoder'


class SandboxYamlConfig(pydantic.BaseModel):
    """The `decoder` section. Missing fields take the values of DEFAULT_CONFIG."""
    model_config = pydantic.ConfigDict(strict=True, extra='forbid')

    enabled: bool = True
    max_steps: NonNegativeInt = DEFAULT_CONFIG.max_steps
    count_opcodes: bool = DEFAULT_CONFIG.count_opcodes

    def to_sandbox_config(self) -> SandboxConfig:
        if not self.enabled:
            return DISABLED_CONFIG
        return SandboxConfig(max_steps=self.max_steps, count_opcodes=self.count_opcodes)


def read_config_file(path: Path) -> SandboxConfig:
    """Read and validate a config file.

    Raises `OSError`, `yaml.YAMLError`, `pydantic.ValidationError` or `ValueError` (wrong structure).
    """
    with open(path) as f:
        data: Any = yaml.safe_load(f)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f'expected a mapping at the top level, got {type(data).__name__}')
    section = data.get(CONFIG_SECTION, {})
    if not isinstance(section, dict):
        raise ValueError(f'{CONFIG_SECTION!r} must be a mapping, got {type(section).__name__}')
    return SandboxYamlConfig.model_validate(section).to_sandbox_config()


class SandboxConfigLoader:
    """Decoder sandbox config read from an optional YAML file when the loader is created.

    Example usage:
        loader = SandboxConfigLoader(config_file='/etc/minser.yaml')
        load(text, config=loader.config)
    """

    __slots__ = ('_config_file', '_current_config', '_default_config')

    def __init__(self, default_config: SandboxConfig = DEFAULT_CONFIG, config_file: Path | str | None = None) -> None:
        """
        Args:
            default_config: Used when there is no file, or when the file does not exist or is invalid.
            config_file: Optional path to a YAML config file.
        """
        self._default_config = default_config
        self._config_file: Path | None = Path(config_file) if config_file else None
        self._current_config = default_config
        self._load_config()

    def _load_config(self) -> None:
        path = self._config_file
        if path is None or not path.exists():
            self._current_config = self._default_config
            logger.debug('using default decoder sandbox config', file=str(path) if path else None)
            return

        try:
            config = read_config_file(path)
        except pydantic.ValidationError as e:
            logger.error('invalid decoder sandbox config, using default config', file=str(path), error=str(e))
            return
        except (OSError, yaml.YAMLError, ValueError) as e:
            logger.error('failed to read decoder sandbox config, using default config', file=str(path), error=str(e))
            return

        self._current_config = config
        logger.info('decoder sandbox config loaded', file=str(path), enabled=config.enabled,
                    max_steps=config.max_steps)

    @property
    def config(self) -> SandboxConfig:
        return self._current_config

    @property
    def config_file(self) -> Path | None:
        return self._config_file

    @property
    def default_config(self) -> SandboxConfig:
        return self._default_config
