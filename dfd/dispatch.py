# -*- coding: utf-8 -*-
"""Asynchronous execution of callback batches.

Callbacks registered on a Deferred are never executed on the stack of the
code who resolves, rejects or notifies it. Instead, each event produces a
batch (a snapshot of the callbacks to call, the payload and the scope), and
the batch is handed to a scheduler who executes it later.

Three schedulers are available:

- ``ThreadScheduler``: a dedicated dispatch thread executes all batches, one
  after the other, in the order they were scheduled. It's the default.
- ``AsyncioScheduler``: batches are executed by an asyncio event loop.
- ``ManualScheduler``: batches are queued until ``run()`` is called. Useful
  for tests, or to integrate with another event loop.
"""

import asyncio
from collections import deque
from concurrent.futures import ThreadPoolExecutor
import logging
from threading import Lock

_logger = logging.getLogger(__name__)


class Scheduler(object):
    """Base class of the schedulers.

    A scheduler receives argument-less callables and must execute them
    later, never during the call to `schedule()`. Tasks must be executed in
    the order they have been scheduled.
    """

    def schedule(self, task):
        raise NotImplementedError()


class ThreadScheduler(Scheduler):
    """Execute the tasks in a single dispatch thread.

    The thread is started at the first call to `schedule()`. It is not a
    daemon thread: at interpreter exit, it is joined after all the tasks
    already scheduled are executed, so a callback who blocks forever
    prevents the program from exiting.
    """

    def __init__(self, name='dfd-dispatch'):
        self._name = name
        self._executor = None
        self._lock = Lock()

    def schedule(self, task):
        with self._lock:
            if self._executor is None:
                _logger.debug('Start dispatch thread "%s"', self._name)
                self._executor = ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix=self._name)
            self._executor.submit(task)

    def shutdown(self, wait=True):
        """Stop the dispatch thread.

        Tasks already scheduled are executed before the thread stops. A
        new thread will be started if `schedule()` is called again.

        Args:
            wait (boolean): if True, returns only when all the pending tasks
                have been executed.
        """
        with self._lock:
            executor = self._executor
            self._executor = None
        if executor is not None:
            _logger.debug('Stop dispatch thread "%s"', self._name)
            executor.shutdown(wait=wait)


class AsyncioScheduler(Scheduler):
    """Execute the tasks in an asyncio event loop.

    Once the scheduler knows its loop, tasks can be scheduled from any
    thread.
    """

    def __init__(self, loop=None):
        """
        Args:
            loop (asyncio.AbstractEventLoop, optional): loop executing the
                tasks. By default, the loop running in the current thread is
                used. If there is none, the scheduler will use the loop
                running when `schedule()` is first called; scheduling a task
                before that raises a RuntimeError.
        """
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                _logger.debug('AsyncioScheduler created outside of a running '
                              'loop.')
        self._loop = loop

    def schedule(self, task):
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        self._loop.call_soon_threadsafe(task)


class ManualScheduler(Scheduler):
    """Queue the tasks until the owner explicitly runs them."""

    def __init__(self):
        self._tasks = deque()

    def schedule(self, task):
        self._tasks.append(task)

    def pending(self):
        """Returns the number of tasks waiting to be executed."""
        return len(self._tasks)

    def run(self):
        """Execute all tasks, including those scheduled during the run.

        Returns:
            int: number of tasks executed.
        """
        count = 0
        while self._tasks:
            task = self._tasks.popleft()
            task()
            count += 1
        return count


_default_scheduler = None
_default_lock = Lock()


def get_default_scheduler():
    """Returns the scheduler used by Deferreds created without scheduler.

    A ThreadScheduler is created the first time, if none has been set.
    """
    global _default_scheduler

    with _default_lock:
        if _default_scheduler is None:
            _default_scheduler = ThreadScheduler()
        return _default_scheduler


def set_default_scheduler(scheduler):
    """Replace the default scheduler.

    Deferreds already created keep the scheduler they had.

    Args:
        scheduler (Scheduler|None): new default scheduler. If None, a new
            ThreadScheduler will be created on the next use.
    """
    global _default_scheduler

    with _default_lock:
        _default_scheduler = scheduler


def scheduler_from_name(name):
    """Create a scheduler from its config name.

    Args:
        name (str): one of 'thread', 'asyncio' or 'manual'.
    Returns:
        Scheduler: new instance.
    Raises:
        ValueError: if the name is unknown.
    """
    kinds = {
        'thread': ThreadScheduler,
        'asyncio': AsyncioScheduler,
        'manual': ManualScheduler
    }
    try:
        return kinds[name.lower()]()
    except KeyError:
        raise ValueError('Unknown scheduler "%s"' % name)


def _exec_callback(callback, payload, scope):
    try:
        callback(payload, scope)
    except Exception:
        _logger.exception('Deferred callback %r raised an exception!',
                          callback)


def dispatch(scheduler, scope, payload, callbacks):
    """Schedule the execution of a batch of callbacks.

    Each callback is called as ``callback(payload, scope)``, in list order.
    An exception raised by a callback is logged, and doesn't prevent the
    next callbacks of the batch to be called.

    Args:
        scheduler (Scheduler): scheduler executing the batch.
        scope: context passed to the callbacks.
        payload: value passed to the callbacks.
        callbacks (list of callable): the list is not copied; the caller must
            not modify it afterward.
    """
    def run_batch():
        for callback in callbacks:
            _exec_callback(callback, payload, scope)

    scheduler.schedule(run_batch)
