"""Shared test fixtures."""

import pytest


class FakeBackend:
    """In-memory stand-in for RefBackend.

    Queued responses are consumed in order; an Exception instance in a
    queue is raised instead of returned. Empty queues fall back to the
    defaults (conflict, age -1, successful delete).
    """

    def __init__(self):
        self.calls = []
        self.creates = []
        self.ages = []
        self.deletes = []
        self.default_age = -1

    @staticmethod
    def _next(queue, default):
        value = queue.pop(0) if queue else default
        if isinstance(value, Exception):
            raise value
        return value

    def try_create(self, name, sha):
        self.calls.append(("try_create", name, sha))
        return self._next(self.creates, False)

    def read_age(self, name):
        self.calls.append(("read_age", name))
        return self._next(self.ages, self.default_age)

    def delete(self, name):
        self.calls.append(("delete", name))
        self._next(self.deletes, None)

    def count(self, op):
        return sum(1 for c in self.calls if c[0] == op)


class FakeClock:
    """Replaces the time module in ref_lock.lock; sleep advances the clock."""

    def __init__(self, now=1_700_000_000.0):
        self.now = now
        self.sleeps = []

    def time(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def fake_clock(monkeypatch):
    from ref_lock import lock

    clock = FakeClock()
    monkeypatch.setattr(lock, "time", clock)
    return clock


@pytest.fixture
def action_env(monkeypatch, tmp_path):
    """Minimal GitHub Actions environment with outputs going to a temp file."""
    output_file = tmp_path / "github_output"
    env = {
        "INPUT_ACTION": "acquire",
        "INPUT_LOCK_NAME": "deploy",
        "INPUT_TOKEN": "ghp_test",
        "GITHUB_REPOSITORY": "owner/repo",
        "GITHUB_SHA": "abc123",
        "GITHUB_OUTPUT": str(output_file),
    }
    for key in (
        "INPUT_TIMEOUT",
        "INPUT_POLL_INTERVAL",
        "INPUT_STALE_THRESHOLD",
        "INPUT_FAIL_ON_TIMEOUT",
        "GITHUB_API_URL",
        "GITHUB_ACTIONS",
    ):
        monkeypatch.delenv(key, raising=False)
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return output_file
