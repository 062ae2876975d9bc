"""Shared fixtures: every test runs against a throwaway home and working directory."""

import logging
import os

import pytest

from clh_cli.utils.log import PACKAGE_LOGGER


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point HOME, the working directory and /etc/clh at temporary directories."""
    home = tmp_path / "home"
    workdir = tmp_path / "work"
    system_dir = tmp_path / "etc" / "clh"
    home.mkdir()
    workdir.mkdir()

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(workdir)
    monkeypatch.setattr("clh_cli.config.resolver.SYSTEM_CONFIG_DIR", system_dir)

    for name in list(os.environ):
        if name.startswith("CLH_"):
            monkeypatch.delenv(name)

    yield {"home": home, "workdir": workdir, "system": system_dir}

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.NOTSET)


@pytest.fixture
def home(isolated_env):
    return isolated_env["home"]


@pytest.fixture
def workdir(isolated_env):
    return isolated_env["workdir"]


@pytest.fixture
def system_dir(isolated_env):
    return isolated_env["system"]
