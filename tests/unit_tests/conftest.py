# -*- coding: utf-8 -*-

import pytest

from dfd import ManualScheduler, set_default_scheduler


class Recorder(object):
    """Callback storing each call as a (payload, scope) tuple."""

    def __init__(self):
        self.calls = []

    def __call__(self, payload, scope):
        self.calls.append((payload, scope))

    @property
    def payloads(self):
        return [payload for payload, _scope in self.calls]


@pytest.fixture
def scheduler():
    """Scheduler executing the tasks only when `run()` is called."""
    return ManualScheduler()


@pytest.fixture
def default_scheduler(request):
    """Replace the default scheduler by a ManualScheduler during the test."""
    scheduler = ManualScheduler()
    set_default_scheduler(scheduler)
    request.addfinalizer(lambda: set_default_scheduler(None))
    return scheduler


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def make_recorder():
    return Recorder
