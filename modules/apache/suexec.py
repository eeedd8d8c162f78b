"""SuExec document-root allow-list (/etc/apache2/suexec/www-data)."""

from __future__ import annotations

from pathlib import Path

from modules.utils import log, read_lines, write_text_atomic


def is_allowed(allow_list: Path, document_path: str) -> bool:
    # Substring match: "/blog" also matches an existing "/blog2" line.
    return any(document_path in line for line in read_lines(allow_list))


def ensure_allowed(allow_list: Path, document_path: str) -> bool:
    """Prepend *document_path* unless a line already contains it."""
    if is_allowed(allow_list, document_path):
        log(f"INFO: {document_path} already in {allow_list} (skip)")
        return False
    lines = read_lines(allow_list)
    write_text_atomic(allow_list, "".join([f"{document_path}\n", *lines]))
    log(f"PASS: Allowed {document_path} in {allow_list}")
    return True
