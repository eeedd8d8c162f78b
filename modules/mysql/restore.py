"""Restore a database from the newest date-stamped backup archive.

Archives are ``*<YYYYMMDD>-<HHMM>.tar.bz2`` files directly inside the
backup directory; the lexicographically greatest name wins. Every regular
member of the archive is streamed, in order, into ``mysql <database>``.
Restore is skipped when the database already has tables.
"""

from __future__ import annotations

import re
import shlex
import shutil
import subprocess
import tarfile
from pathlib import Path

from modules.utils import log, require_argument
from .db import MYSQL_ARGV, count_tables

BACKUP_RE = re.compile(r"^.*[0-9]{8}-[0-9]{4}\.tar\.bz2$")


def find_latest_backup(directory: Path) -> Path | None:
    candidates = [
        p for p in directory.iterdir() if p.is_file() and BACKUP_RE.match(p.name)
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda p: p.name)


def _feed(tar: tarfile.TarFile, pipe) -> None:
    for member in tar:
        if not member.isfile():
            continue
        src = tar.extractfile(member)
        if src is None:
            continue
        with src:
            shutil.copyfileobj(src, pipe)


def stream_archive(archive: Path, database: str) -> None:
    argv = [*MYSQL_ARGV, database]
    log(f"RUN: {shlex.join(argv)} < {archive}")
    with tarfile.open(archive, "r:bz2") as tar:
        proc = subprocess.Popen(argv, stdin=subprocess.PIPE)
        try:
            try:
                _feed(tar, proc.stdin)
            except BrokenPipeError:
                # mysql quit early; its exit status tells why
                log(f"INFO: {argv[0]} closed stdin before {archive} was fully sent")
            try:
                proc.stdin.close()
            except BrokenPipeError:
                pass
        finally:
            rc = proc.wait()
    if rc != 0:
        raise subprocess.CalledProcessError(rc, argv)


def restore_database(database: str, directory: str | Path) -> bool:
    """Returns True when a backup was loaded, False when skipped."""
    require_argument(database, "a database name", "mysql-database-restore")
    require_argument(str(directory or ""), "a backup directory", "mysql-database-restore")
    directory = Path(directory)
    if not directory.is_dir():
        log(f"INFO: backup dir {directory} missing (skip)")
        return False
    tables = count_tables(database)
    if tables >= 1:
        log(f"INFO: {database} already has {tables} table(s) (skip restore)")
        return False
    archive = find_latest_backup(directory)
    if archive is None:
        log(f"INFO: no date-stamped backup in {directory} (skip)")
        return False
    stream_archive(archive, database)
    log(f"PASS: Restored {database} from {archive}")
    return True
