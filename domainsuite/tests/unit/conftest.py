"""Conftest for tests which don't need a cluster"""

from types import SimpleNamespace

import pytest


class FakeClock:
    """Monotonic clock which moves only when the code under test sleeps"""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def monotonic(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock(monkeypatch):
    """Replaces time in the poller with a fake clock"""
    fake = FakeClock()
    monkeypatch.setattr("domainsuite.polling.monotonic", fake.monotonic)
    monkeypatch.setattr("domainsuite.polling.sleep", fake.sleep)
    return fake


def _client(project):
    return SimpleNamespace(project=project, context=None, change_project=_client)


@pytest.fixture
def cluster():
    """Stand-in for KubernetesClient, enough for building object models and switching namespaces"""
    return _client("domain-ns")
