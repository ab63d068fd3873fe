"""Filesystem preparation for the stack's project directory.

All operations are idempotent: re-running a deployment is the recovery
path after a partial failure, so nothing here rolls back.
"""

from __future__ import annotations

import logging
import stat
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

SECRET_MODE = 0o600
SCRIPT_MODE = 0o755


class PreparationError(Exception):
    """A path required for startup is missing or cannot be changed."""

    def __init__(self, code: str, message: str, path: Path) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.path = path


def _chmod(path: Path, mode: int) -> None:
    """chmod that reports failures as ``PREPARE_FAILED``."""
    try:
        path.chmod(mode)
    except OSError as exc:
        raise PreparationError(
            "PREPARE_FAILED", f"Cannot change permissions of {path}: {exc.strerror}", path
        ) from exc


def ensure_directories(root: Path, names: Iterable[str]) -> list[Path]:
    """Create each directory under *root* if absent. Returns the paths."""
    created: list[Path] = []
    for name in names:
        path = root / name
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PreparationError(
                "PREPARE_FAILED", f"Cannot create directory {name}: {exc.strerror}", path
            ) from exc
        created.append(path)
    logger.debug("Ensured %d data directories under %s", len(created), root)
    return created


def restrict_secrets(root: Path, relpaths: Iterable[str]) -> list[Path]:
    """Force owner read/write only on every secret file.

    Raises :class:`PreparationError` on the first missing or unchangeable file.
    """
    secured: list[Path] = []
    for rel in relpaths:
        path = root / rel
        if not path.is_file():
            raise PreparationError("SECRET_MISSING", f"Secret file not found: {rel}", path)
        logger.debug("Securing %s (mode %o)", rel, file_mode(path))
        _chmod(path, SECRET_MODE)
        secured.append(path)
    return secured


def prepare_init_scripts(root: Path, init_dir: str) -> list[Path]:
    """Make the init directory tree world-readable and its scripts executable.

    Every entry under *init_dir* gets ``0755``; ``*.sh`` files in the top
    level additionally get every execute bit. Returns the scripts touched.
    """
    base = root / init_dir
    if not base.is_dir():
        raise PreparationError(
            "INIT_DIR_MISSING", f"Init script directory not found: {init_dir}", base
        )

    _chmod(base, SCRIPT_MODE)
    for path in sorted(base.rglob("*")):
        _chmod(path, SCRIPT_MODE)

    scripts = sorted(base.glob("*.sh"))
    for script in scripts:
        mode = script.stat().st_mode
        _chmod(script, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return scripts


def read_secret(path: Path) -> str:
    """Return a secret file's contents with the trailing newline removed.

    Bytes that are not valid UTF-8 are replaced rather than rejected.
    """
    return path.read_text(encoding="utf-8", errors="replace").rstrip("\r\n")


def file_mode(path: Path) -> int:
    """Permission bits of *path* (``0o600`` style)."""
    return stat.S_IMODE(path.stat().st_mode)
