from dataclasses import replace

import hostprov
from config import Settings


def test_settings_from_env_defaults():
    s = Settings.from_env({})
    assert s.sudo == "sudo"
    assert s.sudo_argv == ["sudo"]
    assert s.php is None


def test_settings_from_env_overrides():
    s = Settings.from_env({"SUDO": "doas -u root", "PHP": "/usr/bin/php-cgi"})
    assert s.sudo_argv == ["doas", "-u", "root"]
    assert s.php == "/usr/bin/php-cgi"


def test_unknown_command(settings, capsys):
    assert hostprov.run("frobnicate", [], settings) == 2
    assert "FAIL: unknown command frobnicate" in capsys.readouterr().out


def test_missing_site_name_reports_argument(settings, commands, capsys):
    assert hostprov.run("apache-sites-create", [], settings) == 1
    out = capsys.readouterr().out
    assert "You must specify a site name to 'apache-sites-create'." in out
    assert commands.calls == []


def test_sites_create_uses_php_from_settings(tmp_path, settings, commands, capsys):
    root = tmp_path / "blog"
    rc = hostprov.run(
        "apache-sites-create",
        ["blog", str(root)],
        settings.with_php("/usr/bin/php-cgi"),
    )
    assert rc == 0
    assert (root / ".cgi-bin" / "php-fcgi").exists()
    assert "PASS: apache-sites-create" in capsys.readouterr().out


def test_command_failure_exits_one(settings, commands, capsys):
    commands.fail["a2enmod"] = 3
    assert hostprov.run("apache-modules-enable", ["fastcgi"], settings) == 1
    assert "a2enmod fastcgi exit=3" in capsys.readouterr().out


def test_io_failure_exits_one(settings, commands, capsys):
    # sources.list does not exist
    assert hostprov.run("apt-mirror-pick", ["de"], settings) == 1
    assert "FAIL:" in capsys.readouterr().out


def test_database_create_positional_defaults(settings, commands):
    assert hostprov.run("mysql-database-create", ["shop"], settings) == 0
    assert "COLLATE 'utf8_general_ci'" in commands.calls[0][-1]


def test_site_provision_orchestrates(tmp_path, settings, commands):
    backups = tmp_path / "backups"
    backups.mkdir()
    rc = hostprov.run(
        "site-provision",
        ["blog", str(tmp_path / "blog"), "--database=blog", f"--backups={backups}"],
        replace(settings, sudo="sudo"),
    )
    assert rc == 0
    tools = [c[1] if c[0] == "sudo" else c[0] for c in commands.calls]
    assert tools == ["chown", "a2ensite", "mysql", "mysql", "service"]


def test_site_provision_no_restart(tmp_path, settings, commands):
    rc = hostprov.run(
        "site-provision", ["blog", str(tmp_path / "blog"), "--no-restart"], settings
    )
    assert rc == 0
    assert [c[0] for c in commands.calls] == ["chown", "a2ensite"]


def test_main_without_args_prints_usage(capsys):
    assert hostprov.main([]) == 2
    assert "apache-sites-create" in capsys.readouterr().err


def test_site_provision_rejects_unknown_flag(tmp_path, settings, commands, capsys):
    rc = hostprov.run(
        "site-provision", ["blog", str(tmp_path / "blog"), "--databse=blog"], settings
    )
    assert rc == 2
    assert "FAIL: unknown flag --databse=blog" in capsys.readouterr().out
    assert commands.calls == []
    assert not (settings.apache_sites_available / "blog").exists()
    assert not (tmp_path / "blog").exists()
