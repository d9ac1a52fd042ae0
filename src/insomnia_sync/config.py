"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles the (read-only) configuration of insomnia-sync:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.insomnia-sync/`` on macOS and Windows. See :func:`get_config_dir`.
* **Config files** -- an optional user-wide ``config.json`` and an optional
  project-local ``insomnia-sync.json``, both deserialised into
  :class:`~insomnia_sync.models.GlobalConfig`. The tool only reads them.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  project-local config, and global config into the final effective
  configuration. Environment variables play no part beyond locating the
  XDG config directory.

Generated workspaces are written with :func:`atomic_write` (temp file then
rename) so a watcher never leaves a half-written file for Insomnia to import.
The written file keeps the mode of the file it replaces, or gets the usual
``0o666 & ~umask`` when it is new.
"""

from __future__ import annotations

import json
import os
import platform
import stat
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from insomnia_sync.exceptions import ConfigError
from insomnia_sync.models import GlobalConfig

_APP_NAME = "insomnia-sync"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "insomnia-sync.json"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir(create: bool = True) -> Path:
    """Return the configuration directory.

    On Linux/BSD: ``$XDG_CONFIG_HOME/insomnia-sync/`` (default
    ``~/.config/insomnia-sync/``). On macOS/Windows: ``~/.insomnia-sync/``.

    Args:
        create: Create the directory when it does not exist.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    if create:
        path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _target_mode(path: Path) -> int:
    """Return the permission bits *path* should end up with after a write."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    The temp file is created owner-only, so it is given the target's mode
    (see :func:`_target_mode`) before the rename.
    On success the temp file is renamed over *path*; on any failure the temp
    file is cleaned up and the error re-raised.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.chmod(tmp_path, _target_mode(path))
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Config files ---


def _read_json(path: Path, label: str) -> Optional[dict[str, Any]]:
    """Read a JSON object from *path*, or ``None`` if the file is absent."""
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {label} at {path}: expected a JSON object")
    return data


def load_global_config() -> Optional[dict[str, Any]]:
    """Load the user-wide configuration as raw JSON.

    Returns:
        The parsed object, or ``None`` if ``config.json`` does not exist.

    Raises:
        ConfigError: If the file exists but is not a valid JSON object.
    """
    path = get_config_dir(create=False) / _CONFIG_FILENAME
    return _read_json(path, "global config")


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./insomnia-sync.json``.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a valid JSON object.
    """
    return _read_json(Path.cwd() / _PROJECT_CONFIG_FILENAME, "project config")


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return *base* updated with *override*, merging nested dicts key by key."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


# --- Precedence resolution ---


def resolve_config(
    cli_interval: Optional[float] = None,
    cli_suffix: Optional[str] = None,
) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_interval``, ``cli_suffix``)
        2. Project config (``./insomnia-sync.json``)
        3. User config (``~/.config/insomnia-sync/config.json``)
        4. Defaults

    Raises:
        ConfigError: If a config file or CLI value is invalid.
    """
    data: dict[str, Any] = {}
    for layer in (load_global_config(), load_project_config()):
        if layer is not None:
            data = _deep_merge(data, layer)

    if cli_interval is not None:
        data = _deep_merge(data, {"watch": {"interval": cli_interval}})
    if cli_suffix is not None:
        data = _deep_merge(data, {"output": {"suffix": cli_suffix}})

    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
