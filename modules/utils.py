"""Utility helpers kept dependency-free.

- init_logging: configure console + file logging with run-id.
- status_pass/status_fail: concise console status lines (with run-id).
- run_cmd/run_capture: thin wrappers over subprocess.run with check enabled.
- log: debug-level logger for normal status lines (file-oriented).
- require_argument: fail fast on a missing required argument.
- read_lines/write_text_atomic: line-file access for system config files.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import tempfile
import uuid
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Callable, Sequence


_RUN_ID = ""


class ProvisionError(Exception):
    """Base error for provisioning operations."""


class ArgumentError(ProvisionError, ValueError):
    def __init__(self, what: str, operation: str):
        super().__init__(f"You must specify {what} to '{operation}'.")
        self.what = what
        self.operation = operation


def _gen_run_id() -> str:
    return uuid.uuid4().hex[:8]


def _log_dir() -> Path:
    override = os.environ.get("HOSTPROV_LOG_DIR")
    if override:
        return Path(override)
    # Project root = parent of 'modules'
    return Path(__file__).resolve().parent.parent / "log"


def init_logging(run_id: str | None = None) -> str:
    """Initialize logging with console + rotating file handlers.

    - Console: minimal, CRITICAL only; status lines are printed directly.
    - File: DEBUG+, rich format, written to log/hostprov-<rid>.log
    Returns the run-id used.
    """
    global _RUN_ID
    if _RUN_ID:
        return _RUN_ID

    rid = run_id or os.environ.get("HOSTPROV_RID") or _gen_run_id()
    _RUN_ID = rid

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    log_dir = _log_dir()
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        logfile = log_dir / f"hostprov-{rid}.log"
    except OSError:
        logfile = Path(f"hostprov-{rid}.log").absolute()

    # Quiet any pre-existing console handlers
    for h in list(root.handlers):
        if isinstance(h, logging.StreamHandler) and not isinstance(
            h, logging.FileHandler
        ):
            h.setLevel(logging.CRITICAL)

    has_file = any(
        isinstance(h, RotatingFileHandler)
        and getattr(h, "baseFilename", "").endswith(logfile.name)
        for h in root.handlers
    )
    if not has_file:
        fh = RotatingFileHandler(logfile, maxBytes=5 * 1024 * 1024, backupCount=3)
        fh.setLevel(logging.DEBUG)
        ffmt = logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
        fh.setFormatter(ffmt)
        root.addHandler(fh)

    # Add a super-quiet console handler if none exist
    if not any(
        isinstance(h, logging.StreamHandler)
        and not isinstance(h, logging.FileHandler)
        for h in root.handlers
    ):
        ch = logging.StreamHandler()
        ch.setLevel(logging.CRITICAL)
        ch.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        root.addHandler(ch)

    logging.debug("Logging initialized. run_id=%s file=%s", rid, logfile)
    os.environ["HOSTPROV_RID"] = rid
    return rid


def _rid() -> str:
    return _RUN_ID or os.environ.get("HOSTPROV_RID", "--------")


def status_pass(msg: str) -> None:
    print(f"PASS: {msg} [{_rid()}]")


def status_fail(msg: str) -> None:
    print(f"FAIL: {msg} [{_rid()}]", flush=True)


def log(msg: str) -> None:
    # File-oriented normal progress; stays out of console noise.
    logging.debug(msg)


def require_argument(value: str | None, what: str, operation: str) -> str:
    """Return *value* or raise ArgumentError when it is empty."""
    if not value:
        raise ArgumentError(what, operation)
    return value


def run_cmd(
    args: Sequence[str], sudo: Sequence[str] = (), input_text: str | None = None
) -> None:
    argv = [*sudo, *args]
    log(f"RUN: {shlex.join(argv)}")
    subprocess.run(argv, check=True, text=True, input=input_text)


def run_capture(args: Sequence[str], sudo: Sequence[str] = ()) -> str:
    argv = [*sudo, *args]
    log(f"RUN: {shlex.join(argv)}")
    proc = subprocess.run(argv, check=True, text=True, capture_output=True)
    return proc.stdout or ""


def read_lines(path: Path) -> list[str]:
    """Return the lines of *path* with line endings kept; [] if missing."""
    if not path.exists():
        return []
    return path.read_text().splitlines(keepends=True)


def write_text_atomic(path: Path, text: str, mode: int | None = None) -> None:
    """Replace *path* with *text* via a temp file in the same directory.

    Keeps the mode and ownership of an existing file unless *mode* is given.
    Errors propagate; the temp file is removed on failure.
    """
    existing = path.stat() if path.exists() else None
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="w", delete=False, dir=str(path.parent), prefix=f".{path.name}."
    ) as tmp:
        tmp_path = tmp.name
        try:
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        except BaseException:
            os.unlink(tmp_path)
            raise
    try:
        if mode is not None:
            os.chmod(tmp_path, mode)
        elif existing is not None:
            os.chmod(tmp_path, existing.st_mode & 0o7777)
        else:
            os.chmod(tmp_path, 0o644)
        if existing is not None and os.geteuid() == 0:
            os.chown(tmp_path, existing.st_uid, existing.st_gid)
        os.replace(tmp_path, str(path))
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
    log(f"WRITE: {path}")


def guarded(action: Callable[[], int]) -> int:
    """Run a CLI action; turn provisioning failures into one FAIL line + exit 1."""
    try:
        return action()
    except ProvisionError as err:
        status_fail(str(err))
        return 1
    except subprocess.CalledProcessError as err:
        logging.exception("command failed")
        cmd = err.cmd if isinstance(err.cmd, str) else shlex.join(map(str, err.cmd))
        status_fail(f"{cmd} exit={err.returncode}; see log")
        return 1
    except OSError as err:
        logging.exception("I/O failure")
        status_fail(str(err))
        return 1
