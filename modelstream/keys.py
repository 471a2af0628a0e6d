"""API key management for modelstream.

Handles loading, saving, and checking backend credentials.
Keys are stored in ~/.modelstream/keys.env and loaded with this priority:
  1. Environment variables (highest — already set in shell)
  2. ~/.modelstream/keys.env (user's saved keys from `modelstream setup`)
  3. .env in current directory (project-level)
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

logger = logging.getLogger(__name__)

# Directory for user-level configuration
MODELSTREAM_HOME = Path.home() / ".modelstream"
KEYS_FILE = MODELSTREAM_HOME / "keys.env"

PAT_ENV = "CLARIFAI_PAT"
MODEL_ID_ENV = "CLARIFAI_MODEL_ID"
API_BASE_ENV = "CLARIFAI_API_BASE"

# (env_var, display_name, required)
KNOWN_KEYS = [
    (PAT_ENV, "Clarifai Personal Access Token", True),
    (MODEL_ID_ENV, "Clarifai model path (user/app/models/name)", True),
    (API_BASE_ENV, "Clarifai API base URL", False),
]

_PAT_RE = re.compile(r"[A-Za-z0-9]{32,}")


def load_keys_env() -> None:
    """Load keys from ~/.modelstream/keys.env and .env into os.environ.

    Respects priority: existing env vars are NOT overwritten.
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


def save_keys(keys: dict[str, str], path: Path | None = None) -> Path:
    """Save keys to ~/.modelstream/keys.env (only non-empty values).

    Returns:
        Path to the saved file.
    """
    target = path or KEYS_FILE
    target.parent.mkdir(parents=True, exist_ok=True)

    lines = ["# modelstream keys", "# Saved by `modelstream setup`", ""]
    for env_var, value in keys.items():
        if value:
            lines.append(f"{env_var}={value}")

    target.write_text("\n".join(lines) + "\n", encoding="utf-8")

    # Restrict permissions on Unix (best-effort)
    try:
        target.chmod(0o600)
    except OSError:
        logger.debug("Could not restrict permissions on %s", target)

    return target


def clear_keys(path: Path | None = None) -> bool:
    """Remove the saved key file. Returns False if it didn't exist."""
    target = path or KEYS_FILE
    if target.is_file():
        target.unlink()
        return True
    return False


def get_configured_keys() -> dict[str, str]:
    """Return env_var -> value for every known key, after loading key files."""
    load_keys_env()
    return {env_var: os.environ.get(env_var, "") for env_var, _, _ in KNOWN_KEYS}


def validate_pat(token: str) -> bool:
    """Check a Personal Access Token's shape: 32+ ASCII alphanumerics.

    This is a local sanity check only; the backend is the authority.
    """
    return bool(_PAT_RE.fullmatch(token))
