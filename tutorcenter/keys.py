"""API key management for the Tutor Center client.

Handles loading, saving, and checking the provider API key.
Keys are resolved with this priority:
  1. Environment variables (highest, already set in shell)
  2. ~/.tutorcenter/keys.env (saved by `tutorcenter setup`)
  3. .env in current directory (project-level)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from tutorcenter.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Directory for user-level configuration
TUTOR_HOME = Path.home() / ".tutorcenter"
KEYS_FILE = TUTOR_HOME / "keys.env"

DEFAULT_KEY_ENV = "GEMINI_API_KEY"
SIGNUP_URL = "https://aistudio.google.com/apikey"


def load_keys_env() -> None:
    """Load API keys from ~/.tutorcenter/keys.env and .env into os.environ.

    Existing env vars are NOT overwritten, and an earlier file wins over
    a later one.
    """
    files = [KEYS_FILE, Path.cwd() / ".env"]
    for env_file in files:
        if env_file.is_file():
            _load_env_file(env_file)


def _load_env_file(path: Path) -> None:
    """Parse a simple KEY=VALUE .env file and set vars that aren't already set."""
    try:
        for line in path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip().strip("'\"")
            if key and not os.environ.get(key):
                os.environ[key] = value
                logger.debug("Loaded %s from %s", key, path)
    except OSError:
        logger.debug("Could not read %s", path)


def save_keys(keys: dict[str, str]) -> Path:
    """Save API keys to ~/.tutorcenter/keys.env.

    Args:
        keys: Mapping of env var name to key value (only non-empty saved).

    Returns:
        Path to the saved file.
    """
    TUTOR_HOME.mkdir(parents=True, exist_ok=True)

    lines = ["# Tutor Center API Keys", "# Saved by `tutorcenter setup`", ""]
    for env_var, value in keys.items():
        if value:
            lines.append(f"{env_var}={value}")

    KEYS_FILE.write_text("\n".join(lines) + "\n", encoding="utf-8")

    # Restrict permissions on Unix (best-effort)
    try:
        KEYS_FILE.chmod(0o600)
    except OSError:
        logger.debug("Could not restrict permissions on %s", KEYS_FILE)

    return KEYS_FILE


def clear_keys() -> bool:
    """Remove ~/.tutorcenter/keys.env if it exists.

    Returns:
        True if the file was removed, False if it didn't exist.
    """
    if KEYS_FILE.is_file():
        KEYS_FILE.unlink()
        return True
    return False


def require_api_key(env_var: str = DEFAULT_KEY_ENV) -> str:
    """Return the configured API key or fail before any network call.

    Raises:
        ConfigurationError: If the variable is unset or blank.
    """
    value = os.environ.get(env_var, "").strip()
    if not value:
        raise ConfigurationError(
            f"No API key configured. Set {env_var} in your environment "
            f"or run `tutorcenter setup` (get a key at {SIGNUP_URL})."
        )
    return value
