"""
Bundle serialization.

The three formats are interchangeable renderings of the same nested
mapping: decoding any of them yields a structure equal to the bundle.
Nothing is reordered, filtered or transformed on the way.
"""

import json
import logging
from typing import Any, Dict, Mapping, Union

import toon_format
import yaml

from .errors import EncodeFailure
from .models import OUTPUT_FORMATS, PackageBundle


logger = logging.getLogger(__name__)

FORMAT_EXTENSIONS: Dict[str, str] = {
    'json': '.json',
    'yaml': '.yaml',
    'toon': '.toon',
}

BundleLike = Union[PackageBundle, Mapping[str, Mapping[str, str]]]


_YAML_LINE_BREAKS = ('\x85', '\u2028', '\u2029')


class _BlockStyleDumper(yaml.SafeDumper):
    """Safe dumper that renders multi-line strings as literal blocks."""


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if any(ch in data for ch in _YAML_LINE_BREAKS):
        # YAML 1.1 line breaks survive a load only as double-quoted escapes
        return dumper.represent_scalar('tag:yaml.org,2002:str', data, style='"')
    if '\n' in data:
        # PyYAML falls back to a quoted style when a block cannot hold the text
        return dumper.represent_scalar('tag:yaml.org,2002:str', data, style='|')
    return dumper.represent_scalar('tag:yaml.org,2002:str', data)


_BlockStyleDumper.add_representer(str, _represent_str)


def _as_dict(bundle: BundleLike) -> Dict[str, Any]:
    if isinstance(bundle, PackageBundle):
        return bundle.to_dict()
    return {name: dict(files) for name, files in bundle.items()}


def _check_format(fmt: str) -> None:
    if fmt not in OUTPUT_FORMATS:
        raise EncodeFailure(
            f"Unsupported output format '{fmt}' (expected one of: {', '.join(OUTPUT_FORMATS)})"
        )


def encode(bundle: BundleLike, fmt: str = 'json') -> str:
    """
    Serialize a bundle.

    Args:
        bundle: The collected bundle (or an equivalent nested mapping).
        fmt: One of ``json``, ``yaml`` or ``toon``.

    Returns:
        The encoded text.

    Raises:
        EncodeFailure: If the format is unknown or serialization fails.
    """
    _check_format(fmt)
    data = _as_dict(bundle)

    try:
        if fmt == 'yaml':
            return yaml.dump(
                data,
                Dumper=_BlockStyleDumper,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )
        if fmt == 'toon':
            return toon_format.encode(data)
        return json.dumps(data, indent=2, ensure_ascii=False)
    except Exception as e:
        raise EncodeFailure(f"Failed to encode bundle as {fmt}: {e}") from e


def decode(text: str, fmt: str = 'json') -> Dict[str, Any]:
    """
    Parse encoded text back into a nested mapping.

    Raises:
        EncodeFailure: If the text is not valid for the format or does not
            hold a mapping.
    """
    _check_format(fmt)

    try:
        if fmt == 'yaml':
            data = yaml.safe_load(text)
        elif fmt == 'toon':
            data = toon_format.decode(text) if text.strip() else {}
        else:
            data = json.loads(text)
    except Exception as e:
        raise EncodeFailure(f"Failed to decode {fmt} output: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise EncodeFailure(f"Decoded {fmt} output is a {type(data).__name__}, not a mapping")

    logger.debug(f"Decoded {fmt} output with {len(data)} package(s)")
    return data
