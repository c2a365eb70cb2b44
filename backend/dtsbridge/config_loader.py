"""
Configuration loader for dtsbridge.

Loads converter settings from .dtsbridge.yaml / .dtsbridge.json in the
project directory, or from an explicitly given file.
"""

import json
import yaml
import logging
import dataclasses
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
from dataclasses import dataclass, field, asdict

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class ConverterConfig:
    """User configuration for a conversion run."""

    # Kotlin package of the generated files; None writes no package header
    package_name: Optional[str] = None

    # Output location; None writes next to each source file
    output_dir: Optional[str] = None
    output_extension: str = '.kt'

    # Interfaces with these names augment types declared elsewhere
    # (e.g. Array, String) and are emitted as extensions
    external_types: List[str] = field(default_factory=list)

    # Member names emitted with `override`
    override_members: List[str] = field(default_factory=list)
    override_properties: List[str] = field(default_factory=list)

    # Stop the batch at the first failing file
    fail_fast: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ConverterConfig':
        """Create from dictionary, filtering unknown keys."""
        valid_keys = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(k for k in data if k not in valid_keys)
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {unknown}")
        filtered_data = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered_data)


class ConfigLoader:
    """Finds and reads converter configuration files."""

    CONFIG_FILES = [
        '.dtsbridge.yaml',
        '.dtsbridge.yml',
        '.dtsbridge.json',
    ]

    @classmethod
    def load(cls, project_path: Union[str, Path]) -> ConverterConfig:
        """
        Load configuration from a project directory.

        Args:
            project_path: Directory searched for a config file

        Returns:
            ConverterConfig from the first config file found, or defaults
        """
        project_path = Path(project_path)

        for config_file in cls.CONFIG_FILES:
            config_path = project_path / config_file
            if config_path.exists():
                logger.info(f"Loading config from: {config_path}")
                return cls.load_file(config_path)

        logger.debug(f"No config file in {project_path}, using defaults")
        return ConverterConfig()

    @classmethod
    def load_file(cls, config_path: Union[str, Path]) -> ConverterConfig:
        """Load config from a JSON or YAML file.

        Raises:
            ConfigurationError: if the file is missing, unreadable or not a mapping
        """
        config_path = Path(config_path)
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                if config_path.suffix in ['.yaml', '.yml']:
                    data = yaml.safe_load(f) or {}
                else:
                    data = json.load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to parse config file: {e}", str(config_path)) from e
        except OSError as e:
            raise ConfigurationError(f"Failed to read config file: {e}", str(config_path)) from e

        if not isinstance(data, dict):
            raise ConfigurationError("Config file must contain a mapping", str(config_path))

        return ConverterConfig.from_dict(data)
