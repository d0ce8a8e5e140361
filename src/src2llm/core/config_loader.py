"""
Loading and validating configuration records.

This is the only place raw, untyped configuration is handled. Everything
past this module receives validated :class:`SourceConfig` instances.

A definition file is JSON or YAML and holds one record, a list of records,
or a mapping with a ``configs`` list::

    configs:
      - id: web
        packageName: web-app
        paths: [./src]
        fileTypes: [.ts, .tsx]
        ignorePaths: [node_modules, dist, "*.log"]
        outputFormat: yaml
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from .errors import ConfigInvalid
from .models import SourceConfig


logger = logging.getLogger(__name__)

DEFAULT_FILE_TYPES: List[str] = ['.js', '.cjs', '.mjs', '.ts', '.mts', '.cts', '.tsx']

DEFAULT_IGNORE_PATHS: List[str] = [
    'e2e',
    'step_definitions',
    '.features-gen',
    'assets',
    'reports',
    'report',
    'dist/server',
    'support/mcp',
    'package-lock.json',
    '.log',
    'node_modules',
    '.git',
    'dist',
    'build',
    'coverage',
    '.cache',
    '.env',
    '.DS_Store',
    'npm-debug.log',
    'yarn-error.log',
    '.idea',
    '.vscode',
    '*.log',
    '*.tmp',
    '*.temp',
    '*.swp',
    'Thumbs.db',
]


def default_config(package_name: str = 'src2llm', paths: Optional[List[str]] = None) -> SourceConfig:
    """Configuration bundling the current directory with the default rules."""
    return SourceConfig(
        id=package_name,
        name='Default',
        description='Default configuration using relative paths',
        package_name=package_name,
        paths=paths or ['.'],
        file_types=list(DEFAULT_FILE_TYPES),
        ignore_paths=list(DEFAULT_IGNORE_PATHS),
        output_format='json',
    )


def _describe_errors(error: ValidationError) -> List[str]:
    messages = []
    for item in error.errors():
        location = '.'.join(str(part) for part in item['loc']) or '<record>'
        messages.append(f"{location}: {item['msg']}")
    return messages


def parse_source_config(raw: Any) -> SourceConfig:
    """
    Validate one raw configuration record.

    Args:
        raw: Mapping as read from a definition file.

    Returns:
        The validated configuration.

    Raises:
        ConfigInvalid: With one message per offending field.
    """
    if not isinstance(raw, dict):
        raise ConfigInvalid(f"Configuration record must be a mapping, got {type(raw).__name__}")
    try:
        return SourceConfig.model_validate(raw)
    except ValidationError as e:
        label = raw.get('id') or raw.get('packageName') or raw.get('package_name') or '<unnamed>'
        raise ConfigInvalid(f"Invalid configuration '{label}'", _describe_errors(e)) from e


def _records(data: Any) -> List[Any]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get('configs'), list):
        return data['configs']
    if isinstance(data, dict):
        return [data]
    raise ConfigInvalid(f"Definition file must hold a mapping or a list, got {type(data).__name__}")


def parse_source_configs(data: Any) -> List[SourceConfig]:
    """
    Validate every record of an already-deserialized definition.

    Records whose id was already seen are skipped (the first one wins).

    Raises:
        ConfigInvalid: If any record is invalid or there are no records.
    """
    configs: List[SourceConfig] = []
    seen = set()
    for raw in _records(data):
        config = parse_source_config(raw)
        if config.id in seen:
            logger.warning(f"Duplicate configuration id '{config.id}' ignored")
            continue
        seen.add(config.id)
        configs.append(config)

    if not configs:
        raise ConfigInvalid("No configurations found")
    return configs


def load_config_file(path: str) -> List[SourceConfig]:
    """
    Read and validate a JSON or YAML definition file.

    Args:
        path: ``.json``, ``.yaml`` or ``.yml`` file.

    Returns:
        Validated configurations in file order.

    Raises:
        ConfigInvalid: If the file is missing, unreadable, malformed or
            holds invalid records.
    """
    extension = os.path.splitext(path)[1].lower()
    if extension not in ('.json', '.yaml', '.yml'):
        raise ConfigInvalid(f"Unsupported definition file type '{extension}': {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
    except OSError as e:
        raise ConfigInvalid(f"Cannot read definition file {path}: {e.strerror or e}") from e

    try:
        data = json.loads(text) if extension == '.json' else yaml.safe_load(text)
    except (ValueError, yaml.YAMLError) as e:
        raise ConfigInvalid(f"Cannot parse definition file {path}: {e}") from e

    if data is None:
        raise ConfigInvalid(f"Definition file is empty: {path}")

    configs = parse_source_configs(data)
    logger.debug(f"Loaded {len(configs)} configuration(s) from {path}")
    return configs


def select_config(configs: List[SourceConfig], config_id: str) -> SourceConfig:
    """Return the configuration with the given id."""
    for config in configs:
        if config.id == config_id:
            return config
    available = ', '.join(c.id for c in configs)
    raise ConfigInvalid(f"Unknown configuration id '{config_id}' (available: {available})")
