from modules.apache.suexec import ensure_allowed, is_allowed


def test_prepends_new_document_root(tmp_path):
    allow = tmp_path / "www-data"
    allow.write_text("/var/www\npublic_html/cgi-bin\n")
    assert ensure_allowed(allow, "/srv/blog") is True
    assert allow.read_text() == "/srv/blog\n/var/www\npublic_html/cgi-bin\n"


def test_missing_allow_list_is_created(tmp_path):
    allow = tmp_path / "suexec" / "www-data"
    assert ensure_allowed(allow, "/blog") is True
    assert allow.read_text() == "/blog\n"


def test_repeated_calls_add_once(tmp_path):
    allow = tmp_path / "www-data"
    allow.write_text("/var/www\n")
    for _ in range(3):
        ensure_allowed(allow, "/blog")
    assert allow.read_text().splitlines().count("/blog") == 1


def test_substring_match_counts_as_present(tmp_path):
    # "/blog" is already covered by the "/blog2" line.
    allow = tmp_path / "www-data"
    allow.write_text("/blog2\n")
    assert is_allowed(allow, "/blog")
    assert ensure_allowed(allow, "/blog") is False
    assert allow.read_text() == "/blog2\n"


def test_keeps_file_mode(tmp_path):
    allow = tmp_path / "www-data"
    allow.write_text("/var/www\n")
    allow.chmod(0o600)
    ensure_allowed(allow, "/blog")
    assert allow.stat().st_mode & 0o777 == 0o600
