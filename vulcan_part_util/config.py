"""
Drive configuration presets and profile loading.

A drive profile is a JSON object whose keys are DriveConfig fields. Profiles
are merged over a preset, and command-line options override both.
"""

import json
from dataclasses import asdict, fields, replace
from pathlib import Path
from typing import Any

from .builder import DriveConfig
from .constants import DRIVE_TYPE_CONNER_30104, DRIVE_TYPE_SWIFT_200
from .exceptions import ConfigError

# Compact Flash geometry that works reliably with the partition manager:
# 6 heads and 39 sectors per track. Other head/sector counts cause formatting
# and copy failures on some partitions.
CF_HEADS = 6
CF_SECTORS = 39

DRIVE_PRESETS = {
    'cf-4': {
        'description': 'CF card, 4 full ProDOS partitions (all active)',
        'drive_type': DRIVE_TYPE_CONNER_30104,
        'full_partitions': 4,
        'heads': CF_HEADS,
        'sectors': CF_SECTORS,
        'interleave': 1,
    },
    'cf-5': {
        'description': 'CF card, 5 full ProDOS partitions (4 active)',
        'drive_type': DRIVE_TYPE_SWIFT_200,
        'full_partitions': 5,
        'heads': CF_HEADS,
        'sectors': CF_SECTORS,
        'interleave': 1,
    },
}

DEFAULT_PRESET = 'cf-5'

CONFIG_KEYS = frozenset(f.name for f in fields(DriveConfig) if f.name != 'derived_counts')
COUNT_KEYS = frozenset({'block_count', 'cylinders'})
GEOMETRY_KEYS = frozenset({'heads', 'sectors', 'full_partitions', 'max_partition_blocks'})


def get_preset(name: str = DEFAULT_PRESET) -> DriveConfig:
    """Build the DriveConfig for a named preset."""
    if not isinstance(name, str) or name not in DRIVE_PRESETS:
        raise ConfigError(
            f"Unknown drive preset: {name!r}. Use one of: {', '.join(sorted(DRIVE_PRESETS))}"
        )
    params = {k: v for k, v in DRIVE_PRESETS[name].items() if k != 'description'}
    return DriveConfig.for_partitions(**params)


def apply_overrides(config: DriveConfig, **overrides: Any) -> DriveConfig:
    """
    Return a copy of `config` with non-None overrides applied.

    Changing heads, sectors or full_partitions re-derives the block and
    cylinder counts, unless either count is given here or was set explicitly
    on `config`.
    """
    overrides = {k: v for k, v in overrides.items() if v is not None}
    unknown = set(overrides) - CONFIG_KEYS
    if unknown:
        raise ConfigError(f"Unknown drive configuration keys: {', '.join(sorted(unknown))}")
    if not overrides:
        return config

    if COUNT_KEYS & set(overrides):
        return replace(config, derived_counts=False, **overrides)

    if GEOMETRY_KEYS & set(overrides) and config.derived_counts:
        values = asdict(config)
        values.update(overrides)
        full = values.pop('full_partitions')
        heads = values.pop('heads')
        sectors = values.pop('sectors')
        for key in ('block_count', 'cylinders', 'derived_counts'):
            values.pop(key)
        return DriveConfig.for_partitions(full, heads=heads, sectors=sectors, **values)

    return replace(config, **overrides)


def load_drive_config(path: str | Path, base: DriveConfig | None = None) -> DriveConfig:
    """
    Load a JSON drive profile and merge it over `base`.

    A profile may name a preset with a "preset" key; other keys must be
    DriveConfig fields. Null values are rejected.

    Raises:
        ConfigError: If the file cannot be read or holds invalid settings
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            loaded = json.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read drive profile {path}: {e}")
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in drive profile {path}: {e}")

    if not isinstance(loaded, dict):
        raise ConfigError(f"Drive profile {path} must contain a JSON object")

    nulls = sorted(k for k, v in loaded.items() if v is None)
    if nulls:
        raise ConfigError(f"Drive profile {path} has null values for: {', '.join(nulls)}")

    if 'preset' in loaded:
        preset = loaded.pop('preset')
        if not isinstance(preset, str):
            raise ConfigError(f"Drive profile {path}: preset must be a name, got {preset!r}")
        base = get_preset(preset)
    elif base is None:
        base = get_preset()

    return apply_overrides(base, **loaded)
