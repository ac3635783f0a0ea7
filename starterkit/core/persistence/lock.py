"""
Advisory per-target lock — refuse overlapping runs on one directory.

The lock file lives in the system temp dir, keyed by a hash of the
resolved target path, so nothing is ever written inside the project
being scaffolded. A lock whose owner process is gone is reclaimed.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from starterkit.core.errors import PreconditionError

logger = logging.getLogger(__name__)

LOCK_DIR_NAME = "starterkit-locks"


def default_lock_dir() -> Path:
    return Path(tempfile.gettempdir()) / LOCK_DIR_NAME


def lock_path_for(target: str | Path, lock_dir: Path | None = None) -> Path:
    resolved = str(Path(target).resolve())
    digest = hashlib.sha1(resolved.encode("utf-8")).hexdigest()
    return (lock_dir or default_lock_dir()) / f"{digest}.lock"


def _read_owner(lock_path: Path) -> dict[str, Any]:
    try:
        data = json.loads(lock_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def _pid_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    return True


def _is_stale(lock_path: Path) -> bool:
    # Locks are linked into place fully written, so one without a pid is debris
    pid = _read_owner(lock_path).get("pid")
    return not isinstance(pid, int) or not _pid_alive(pid)


def _publish(lock_path: Path, owner: dict[str, Any]) -> None:
    """Create ``lock_path`` holding ``owner``, or raise FileExistsError.

    The record is written to a private temp file first and hard-linked
    into place, so the lock never exists half-written.
    """
    fd, tmp_name = tempfile.mkstemp(dir=lock_path.parent, prefix=".", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(owner, f)
        os.link(tmp_name, lock_path)
    finally:
        os.unlink(tmp_name)


@contextmanager
def target_lock(target: str | Path, operation: str = "", lock_dir: Path | None = None) -> Iterator[Path]:
    """Hold an exclusive advisory lock on ``target`` for the block.

    Raises:
        PreconditionError: another live run holds the lock.
    """
    lock_path = lock_path_for(target, lock_dir)
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    token = f"{os.getpid()}-{int(time.time() * 1000)}"
    owner = {"token": token, "pid": os.getpid(), "operation": operation, "target": str(target)}

    for _ in range(2):
        try:
            _publish(lock_path, owner)
        except FileExistsError:
            if _is_stale(lock_path):
                logger.warning("Reclaiming stale lock %s", lock_path)
                lock_path.unlink(missing_ok=True)
                continue
            holder = _read_owner(lock_path)
            raise PreconditionError(
                f"Another operation ({holder.get('operation') or 'unknown'}) is already "
                f"running against {target}. Wait for it to finish and retry."
            ) from None
        break
    else:
        raise PreconditionError(f"Could not acquire lock for {target}")

    logger.debug("Acquired lock %s for %s", lock_path, target)
    try:
        yield lock_path
    finally:
        if _read_owner(lock_path).get("token") == token:
            lock_path.unlink(missing_ok=True)
            logger.debug("Released lock %s", lock_path)
