"""TOML configuration loader.

Loads provider and curriculum defaults from defaults.toml into the
immutable settings schemas used to build the provider handle and the
tutor facade.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

from tutorcenter.schemas.settings import ProviderSettings, TutorSettings

# Default config directory relative to the tutorcenter package
_CONFIG_DIR = Path(__file__).parent / "config"

MODEL_OVERRIDE_ENV = "TUTORCENTER_MODEL"


def _read_toml(config_path: Path | None) -> tuple[Path, dict]:
    path = config_path or _CONFIG_DIR / "defaults.toml"
    if not path.exists():
        raise FileNotFoundError(f"Tutor config not found: {path}")

    with open(path, "rb") as f:
        return path, tomllib.load(f)


def load_provider_settings(config_path: Path | None = None) -> ProviderSettings:
    """Load the [provider] section.

    Args:
        config_path: Path to a defaults.toml. Defaults to the shipped one.

    Returns:
        ProviderSettings with the model override applied.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If the [provider] section is missing.
    """
    path, raw = _read_toml(config_path)

    section = raw.get("provider")
    if not section or not isinstance(section, dict):
        raise ValueError(f"No [provider] section found in {path}")

    data = dict(section)
    override = os.environ.get(MODEL_OVERRIDE_ENV, "").strip()
    if override:
        data["model"] = override
    return ProviderSettings(**data)


def load_tutor_settings(config_path: Path | None = None) -> TutorSettings:
    """Load the [tutor] section, falling back to schema defaults when absent."""
    _, raw = _read_toml(config_path)
    return TutorSettings(**raw.get("tutor", {}))
