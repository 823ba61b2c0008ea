## tolerances and defaults for projgeom, loaded from YAML

## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2020 yapCAD contributors
## All rights reserved

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
# 
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
# 
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""Configuration loading with bundled defaults and external overrides.

Tolerances and defaults live in YAML documents:

- the bundled ``data/defaults.yaml`` (always loaded first)
- ``~/.config/projgeom/config.yaml`` if present
- the file named by the ``PROJGEOM_CONFIG`` environment variable

Later sources override earlier ones key by key.  Every document must be a
mapping with a ``schema_version`` of 1.x; sections are flattened, so
``conic: {num_points: 100}`` is read back as ``get_setting("num_points")``.

Example:
    export PROJGEOM_CONFIG="$HOME/my_tolerances.yaml"
"""

from __future__ import annotations

import os
import sys
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from projgeom.log import get_logger

__all__ = [
    "PROJGEOM_CONFIG",
    "load_config",
    "get_setting",
    "clear_cache",
]

PROJGEOM_CONFIG = "PROJGEOM_CONFIG"

_BUNDLED_DEFAULTS = Path(__file__).parent / "data" / "defaults.yaml"

logger = get_logger(__name__)


def clear_cache() -> None:
    """Forget cached settings so the next lookup reloads every source."""
    _load_config_cached.cache_clear()


def _config_sources() -> List[Path]:
    """Return the YAML files to read, lowest priority first."""
    sources: List[Path] = [_BUNDLED_DEFAULTS]

    if sys.platform == "win32":
        config_base = Path(os.environ.get("APPDATA", "~")).expanduser()
    else:
        config_base = Path.home() / ".config"
    user_config = config_base / "projgeom" / "config.yaml"
    if user_config.is_file():
        sources.append(user_config)

    env_path = os.environ.get(PROJGEOM_CONFIG)
    if env_path:
        path = Path(env_path).expanduser()
        if not path.is_file():
            raise FileNotFoundError(f"{PROJGEOM_CONFIG} names a missing file: {path}")
        sources.append(path)

    return sources


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load, validate and flatten one configuration document."""
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Invalid configuration in {path}: expected mapping at root")

    schema_version = data.get("schema_version", "1.0")
    if not isinstance(schema_version, str) or not schema_version.startswith("1."):
        raise ValueError(
            f"Unsupported schema version '{schema_version}' in {path}. "
            f"Expected version 1.x"
        )

    flat: Dict[str, Any] = {}
    for key, value in data.items():
        if key == "schema_version":
            continue
        if isinstance(value, dict):
            for subkey, subvalue in value.items():
                flat[subkey] = subvalue
        else:
            flat[key] = value
    return flat


@lru_cache(maxsize=8)
def _load_config_cached(custom_path_str: Optional[str]) -> Dict[str, Any]:
    settings: Dict[str, Any] = {}
    sources = _config_sources()
    if custom_path_str:
        custom = Path(custom_path_str)
        if not custom.exists():
            raise FileNotFoundError(f"Custom configuration not found: {custom}")
        sources.append(custom)
    for path in sources:
        settings.update(_load_yaml(path))
        logger.debug("loaded configuration from %s", path)
    return settings


def load_config(custom_path: Optional[Path] = None) -> Dict[str, Any]:
    """Return the merged settings dictionary.

    Args:
        custom_path: Optional YAML file applied on top of every other source.

    Raises:
        FileNotFoundError: If an explicitly named file does not exist
        ValueError: If a document has an invalid format
    """
    custom_str = str(custom_path) if custom_path else None
    return dict(_load_config_cached(custom_str))


def get_setting(name: str, custom_path: Optional[Path] = None) -> Any:
    """Return a single setting by name.

    Raises:
        KeyError: If no source defines ``name``
    """
    settings = _load_config_cached(str(custom_path) if custom_path else None)
    if name not in settings:
        raise KeyError(f"Unknown projgeom setting '{name}'")
    return settings[name]
