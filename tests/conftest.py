"""Shared test configuration and synchronous stand-ins for Qt timers and pools."""

import os

import pytest

# Widgets are created in tests; no display is available on CI
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


class ManualScheduler:
    """Collects scheduled callbacks until the test runs them."""

    def __init__(self):
        self.pending = []

    def __call__(self, delay_ms, callback):
        self.pending.append((delay_ms, callback))

    def run_pending(self):
        pending, self.pending = self.pending, []
        for _, callback in pending:
            callback()


class ImmediateThreadPool:
    """Runs workers on the calling thread."""

    def __init__(self):
        self.started = []

    def start(self, worker):
        self.started.append(worker)
        worker.run()


class DeferredThreadPool:
    """Holds workers until the test releases them."""

    def __init__(self):
        self.started = []

    def start(self, worker):
        self.started.append(worker)

    def run_all(self):
        started, self.started = self.started, []
        for worker in started:
            worker.run()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def immediate_pool():
    return ImmediateThreadPool()


@pytest.fixture
def deferred_pool():
    return DeferredThreadPool()
