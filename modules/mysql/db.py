"""mysql client helpers. All SQL goes through the ``mysql`` binary as root."""

from __future__ import annotations

import logging
import subprocess

from config import DEFAULT_CHARSET, DEFAULT_COLLATION, MYSQL_USER, Settings
from modules.utils import log, read_lines, require_argument, run_capture, run_cmd, write_text_atomic

MYSQL_ARGV = ["mysql", "-u", MYSQL_USER]

# Passwordless root from anywhere; only sane on a host-only network.
REMOTE_ROOT_SQL = (
    "GRANT ALL PRIVILEGES ON *.* TO 'root'@'%' IDENTIFIED BY '' WITH GRANT OPTION; "
    "FLUSH PRIVILEGES;"
)
LOOPBACK = "127.0.0.1"
ANY_ADDRESS = "0.0.0.0"


def quote_ident(name: str) -> str:
    return "`" + name.replace("`", "``") + "`"


def quote_literal(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "''") + "'"


def run_mysql(sql: str) -> None:
    run_cmd([*MYSQL_ARGV, "-e", sql])


def create_database(
    name: str, charset: str | None = None, collation: str | None = None
) -> None:
    require_argument(name, "a database name", "mysql-database-create")
    charset = charset or DEFAULT_CHARSET
    collation = collation or DEFAULT_COLLATION
    run_mysql(
        f"CREATE DATABASE IF NOT EXISTS {quote_ident(name)} "
        f"CHARACTER SET {charset} COLLATE {quote_literal(collation)}"
    )
    log(f"PASS: Database {name} ({charset}/{collation}) ready")


def count_tables(name: str) -> int:
    """Number of tables in *name*; 0 when the database cannot be read."""
    try:
        out = run_capture(
            [*MYSQL_ARGV, "--skip-column-names", "-e", f"SHOW TABLES FROM {quote_ident(name)}"]
        )
    except subprocess.CalledProcessError as err:
        logging.warning("Could not list tables of %s: %s", name, (err.stderr or "").strip())
        return 0
    return sum(1 for line in out.splitlines() if line.strip())


def allow_remote_access(settings: Settings) -> bool:
    run_mysql(REMOTE_ROOT_SQL)
    path = settings.mysql_cnf
    text = "".join(read_lines(path))
    if LOOPBACK not in text:
        log(f"INFO: {path} does not bind {LOOPBACK} (skip)")
        return False
    write_text_atomic(path, text.replace(LOOPBACK, ANY_ADDRESS))
    log(f"PASS: {path} now binds {ANY_ADDRESS}")
    return True


def restart(settings: Settings) -> None:
    run_cmd(["service", "mysql", "restart"], sudo=settings.sudo_argv)
