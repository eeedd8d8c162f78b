"""Manage nameserver entries in resolv.conf.

``purge_local`` blanks every local 10.0.x.x nameserver line; ``append``
adds ``nameserver <ip>`` unless the IP already appears anywhere in the file. Other lines are preserved intact.
"""

from __future__ import annotations

import re

from config import Settings
from modules.utils import (
    log,
    read_lines,
    require_argument,
    write_text_atomic,
)

LOCAL_NAMESERVER_RE = re.compile(r"nameserver\s*10\.0\..*$")


def _split_ending(line: str) -> tuple[str, str]:
    body = line.rstrip("\r\n")
    return body, line[len(body):]


def purge_local(settings: Settings) -> int:
    """Blank out local 10.0.x.x nameservers; returns the number of hits.

    The matched text is removed but its line stays behind empty.
    """
    path = settings.resolv_conf
    lines = read_lines(path)
    kept = []
    hits = 0
    for line in lines:
        body, ending = _split_ending(line)
        new_body, n = LOCAL_NAMESERVER_RE.subn("", body)
        hits += n
        kept.append(new_body + ending)
    if hits == 0:
        log(f"INFO: no local nameservers in {path}")
        return 0
    write_text_atomic(path, "".join(kept))
    log(f"PASS: Purged {hits} local nameserver(s) from {path}")
    return hits


def append(ip: str, settings: Settings) -> bool:
    require_argument(ip, "a nameserver IP", "nameservers-append")
    path = settings.resolv_conf
    lines = read_lines(path)
    if any(ip in line for line in lines):
        log(f"INFO: {ip} already in {path} (skip)")
        return False
    if lines and not lines[-1].endswith("\n"):
        lines[-1] += "\n"
    lines.append(f"nameserver {ip}\n")
    write_text_atomic(path, "".join(lines))
    log(f"PASS: Added nameserver {ip} to {path}")
    return True

