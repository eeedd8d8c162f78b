from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from config import Settings


class CommandRecorder:
    """Stands in for subprocess.run; records argv and returns canned output."""

    def __init__(self):
        self.calls: list[list[str]] = []
        self.inputs: list[str | None] = []
        self.stdout: dict[str, str] = {}
        self.fail: dict[str, int] = {}

    def __call__(self, argv, check=False, text=False, input=None, capture_output=False, **kw):
        argv = list(argv)
        self.calls.append(argv)
        self.inputs.append(input)
        key = " ".join(argv)
        out = ""
        for needle, value in self.stdout.items():
            if needle in key:
                out = value
        rc = 0
        for needle, code in self.fail.items():
            if needle in key:
                rc = code
        if check and rc:
            raise subprocess.CalledProcessError(rc, argv, output=out, stderr="boom")
        return subprocess.CompletedProcess(argv, rc, stdout=out, stderr="")

    def tools(self) -> list[str]:
        return [c[0] for c in self.calls]


@pytest.fixture
def commands(monkeypatch):
    recorder = CommandRecorder()
    monkeypatch.setattr(subprocess, "run", recorder)
    return recorder


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    etc = tmp_path / "etc"
    (etc / "apache2" / "sites-available").mkdir(parents=True)
    (etc / "apache2" / "suexec").mkdir(parents=True)
    (etc / "apt").mkdir(parents=True)
    (etc / "mysql").mkdir(parents=True)
    return Settings(
        sudo="",
        resolv_conf=etc / "resolv.conf",
        apt_sources=etc / "apt" / "sources.list",
        apache_sites_available=etc / "apache2" / "sites-available",
        apache_log_dir=tmp_path / "var" / "log" / "apache2",
        suexec_allow_list=etc / "apache2" / "suexec" / "www-data",
        mysql_cnf=etc / "mysql" / "my.cnf",
    )


@pytest.fixture(autouse=True)
def _log_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("HOSTPROV_LOG_DIR", str(tmp_path / "log"))
    monkeypatch.setenv("HOSTPROV_RID", "testrun")
