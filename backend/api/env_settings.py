"""
Runtime settings store for the admin panel.

The live `settings` object is never mutated. Admin edits are written to the
environment file (``settings.ENV_FILE_PATH``) with python-dotenv; each write
snapshots the previous file as ``<file>.v<N>`` and bumps ``CONFIG_VERSION``.
The new values are picked up by the next process start, triggered from
``POST /api/admin/restart-server``.

Only the keys in ``EDITABLE_KEYS`` are exposed; secret-looking values are
masked on read.
"""

import logging
import os
import shutil
import signal
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values, set_key

from backend.database.config.config import settings

logger = logging.getLogger(__name__)

VERSION_KEY = "CONFIG_VERSION"

EDITABLE_KEYS = (
    "API_KEY",
    "OPEN_AI_MODEL",
    "INTERNAL_LAWS_API_URL",
    "INTERNAL_LAWS_API_KEY",
    "LAWS_API_TIMEOUT",
    "FRONTEND_URL",
    "ACCESS_TOKEN_EXPIRE_MINUTES",
    "LOG_LEVEL",
)

SECRET_MARKERS = ("KEY", "SECRET", "PASSWORD")

INTEGER_KEYS = ("ACCESS_TOKEN_EXPIRE_MINUTES",)
FLOAT_KEYS = ("LAWS_API_TIMEOUT",)


class EnvSettingsError(Exception):
    """Rejected settings update (unknown key or invalid value)."""


def is_secret(key: str) -> bool:
    return any(marker in key.upper() for marker in SECRET_MARKERS)


def mask_value(key: str, value: Optional[str]) -> str:
    """
    Mask secret values as their first 4 characters followed by ``****``.

    Values of 4 characters or fewer are fully masked. Non-secret keys are
    returned unchanged.
    """
    value = "" if value is None else str(value)
    if not is_secret(key) or not value:
        return value
    if len(value) <= 4:
        return "****"
    return f"{value[:4]}****"


def _env_path(path: Optional[str] = None) -> Path:
    return Path(path or settings.ENV_FILE_PATH)


def _current_values(path: Path) -> Dict[str, Optional[str]]:
    return dotenv_values(path) if path.exists() else {}


def _current_version(values: Dict[str, Optional[str]]) -> int:
    try:
        return int(values.get(VERSION_KEY) or 0)
    except ValueError:
        return 0


def _effective_value(values: Dict[str, Optional[str]], key: str) -> str:
    """Value applied on the next start: the file entry, else the one currently in effect."""
    raw = values.get(key)
    if raw is None:
        live = getattr(settings, key, None)
        raw = "" if live is None else str(live)
    return raw


def read_env_settings(path: Optional[str] = None) -> dict:
    """
    Editable settings as they will be applied on the next start, masked.

    A key missing from the file shows the value currently in effect.

    Returns
    -------
    dict
        ``{"settings": {KEY: masked_value}, "version": int}``
    """
    env_path = _env_path(path)
    values = _current_values(env_path)
    result = {key: mask_value(key, _effective_value(values, key)) for key in EDITABLE_KEYS}
    return {"settings": result, "version": _current_version(values)}


def _validate(updates: Dict[str, str]) -> None:
    unknown = sorted(set(updates) - set(EDITABLE_KEYS))
    if unknown:
        raise EnvSettingsError(f"Chaves não permitidas: {', '.join(unknown)}")
    for key in INTEGER_KEYS:
        if key in updates:
            try:
                if int(updates[key]) <= 0:
                    raise ValueError
            except ValueError:
                raise EnvSettingsError(f"{key} deve ser um inteiro positivo")
    for key in FLOAT_KEYS:
        if key in updates:
            try:
                if float(updates[key]) <= 0:
                    raise ValueError
            except ValueError:
                raise EnvSettingsError(f"{key} deve ser um número positivo")


def write_env_settings(updates: Dict[str, str], path: Optional[str] = None) -> int:
    """
    Persist settings to the environment file as a new version.

    A secret sent back exactly as `read_env_settings` masked it is left
    untouched, so a client can return what it read without overwriting the
    secret with ``abcd****`` (or an unset secret with an empty string).

    Returns
    -------
    int
        The new configuration version.

    Raises
    ------
    EnvSettingsError
        On unknown keys or invalid numeric values. Nothing is written.
    """
    _validate(updates)
    env_path = _env_path(path)
    values = _current_values(env_path)
    version = _current_version(values)

    if env_path.exists():
        shutil.copyfile(env_path, env_path.with_name(f"{env_path.name}.v{version}"))
    else:
        env_path.touch()

    for key, value in updates.items():
        if is_secret(key) and value == mask_value(key, _effective_value(values, key)):
            continue
        set_key(str(env_path), key, value)

    version += 1
    set_key(str(env_path), VERSION_KEY, str(version))
    logger.info("Environment settings saved as version %s (%s)", version, ", ".join(sorted(updates)))
    return version


def terminate_process() -> None:
    """Ask the current process to shut down; the supervisor starts a fresh one."""
    logger.warning("Restart requested from the admin panel, sending SIGTERM to pid %s", os.getpid())
    os.kill(os.getpid(), signal.SIGTERM)
