"""
Tests for the package version lookup.
"""
import importlib
import subprocess

import python_i18n_check


def test_version_from_environment(monkeypatch):
    monkeypatch.setenv("PACKAGE_VERSION", "1.2.3")
    assert importlib.reload(python_i18n_check).__version__ == "1.2.3"


def test_version_falls_back_without_git(monkeypatch):
    def no_git(*args, **kwargs):
        raise FileNotFoundError("git")

    monkeypatch.delenv("PACKAGE_VERSION", raising=False)
    monkeypatch.setattr(subprocess, "run", no_git)
    assert importlib.reload(python_i18n_check).__version__ == "0.1.0"
