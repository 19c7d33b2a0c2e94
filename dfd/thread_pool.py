# -*- coding: utf-8 -*-

from concurrent.futures import ThreadPoolExecutor as Executor
import logging

from .deferred import Deferred

_logger = logging.getLogger(__name__)


class ThreadPoolExecutor(object):
    """Execute callables asynchronously on demand, in another threads."""

    def __init__(self, max_workers, scheduler=None):
        """Initialize the thread pool

        Args:
            max_workers: The maximum number of threads that can be used to
                execute the given calls.
            scheduler (Scheduler, optional): scheduler of the Deferreds
                created by `submit()`.
        """
        self._executor = Executor(max_workers)
        self._scheduler = scheduler

    def submit(self, callback, *args, **kwargs):
        """Schedule the callable to be executed and return a Promise.

        Args:
            callback (callable): callback who will run in another thread.
            *args: argument passed to callback.
            **kwargs: keywords arguments passed to callback.
        Returns:
            Promise: Promise who resolve after the callback has been executed.
                It's resolved with the value returned by the callback.
                If the callback raise an exception, the promise is rejected
                with this exception.
        """
        df = Deferred(scheduler=self._scheduler)

        def on_future_done(f):
            error = f.exception()
            if error is not None:
                _logger.debug('Task %r has failed: %r', callback, error)
                df.reject(error)
            else:
                df.resolve(f.result())

        f = self._executor.submit(callback, *args, **kwargs)
        f.add_done_callback(on_future_done)

        return df.promise()

    def shutdown(self, wait=True):
        """Free the threads once all submitted calls are done.

        Args:
            wait (boolean): if True, returns only when all the calls have
                been executed.
        """
        self._executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, _type, _value, _tb):
        self.shutdown()
