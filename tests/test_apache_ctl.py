import subprocess

import pytest

from modules.apache import ctl
from modules.utils import ArgumentError


@pytest.mark.parametrize(
    "func, tool",
    [
        (ctl.enable_modules, "a2enmod"),
        (ctl.disable_modules, "a2dismod"),
        (ctl.enable_sites, "a2ensite"),
        (ctl.disable_sites, "a2dissite"),
    ],
)
def test_toggles(func, tool, settings, commands):
    func(["one", "two"], settings)
    assert commands.calls == [[tool, "one", "two"]]


@pytest.mark.parametrize(
    "func, command",
    [
        (ctl.enable_modules, "apache-modules-enable"),
        (ctl.disable_modules, "apache-modules-disable"),
        (ctl.enable_sites, "apache-sites-enable"),
        (ctl.disable_sites, "apache-sites-disable"),
    ],
)
def test_toggle_requires_names(func, command, settings, commands):
    with pytest.raises(ArgumentError) as exc:
        func([], settings)
    assert exc.value.operation == command
    assert f"to '{command}'." in str(exc.value)
    assert commands.calls == []


def test_restart(settings, commands):
    ctl.restart(settings)
    assert commands.calls == [["service", "apache2", "restart"]]


def test_failure_propagates(settings, commands):
    commands.fail["a2enmod"] = 1
    with pytest.raises(subprocess.CalledProcessError):
        ctl.enable_modules(["fastcgi"], settings)
