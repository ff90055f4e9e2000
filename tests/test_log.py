"""Tests for log.py — timestamped output + GA annotations."""

import re

import pytest


@pytest.fixture(autouse=True)
def _not_in_actions(monkeypatch):
    monkeypatch.delenv("GITHUB_ACTIONS", raising=False)


def test_info(capsys):
    from ref_lock.log import info

    info("test message")
    out = capsys.readouterr().out
    assert re.match(r"\[\d{2}:\d{2}:\d{2}\] test message\n", out)


def test_success(capsys):
    from ref_lock.log import success

    success("lock acquired")
    out = capsys.readouterr().out
    assert "✓ lock acquired" in out


def test_notice(capsys):
    from ref_lock.log import notice

    notice("stale lock")
    out = capsys.readouterr().out
    assert "stale lock" in out
    assert "::notice::" not in out


def test_warning(capsys):
    from ref_lock.log import warning

    warning("retrying")
    captured = capsys.readouterr()
    assert "WARNING: retrying" in captured.err
    assert captured.out == ""


def test_error(capsys):
    from ref_lock.log import error

    error("something broke")
    err = capsys.readouterr().err
    assert "ERROR: something broke" in err


def test_github_actions_notice(capsys, monkeypatch):
    monkeypatch.setenv("GITHUB_ACTIONS", "true")
    from ref_lock.log import notice

    notice("stale lock removed")
    out = capsys.readouterr().out
    assert "::notice::stale lock removed" in out


def test_github_actions_warning(capsys, monkeypatch):
    monkeypatch.setenv("GITHUB_ACTIONS", "true")
    from ref_lock.log import warning

    warning("lock attempt failed")
    out = capsys.readouterr().out
    assert "::warning::lock attempt failed" in out


def test_github_actions_error(capsys, monkeypatch):
    monkeypatch.setenv("GITHUB_ACTIONS", "true")
    from ref_lock.log import error

    error("timed out")
    out = capsys.readouterr().out
    assert "::error::timed out" in out
