# -*- coding: utf-8 -*-

from .util import extend


class Promise(object):
    """Read-only view of a Deferred.

    It represents the future value from the consumer side. It allows to add
    callbacks to the Deferred and to chain it, but it gives no access to
    `resolve()`, `reject()` nor `notify()`: code who receives a Promise can't
    settle it.
    """

    # Methods copied on the target when promisifying an object.
    OBSERVERS = ('done', 'fail', 'progress', 'always', 'then', 'state')

    __slots__ = ('_deferred',)

    def __init__(self, deferred):
        self._deferred = deferred

    def __repr__(self):
        return 'Promise(%s)' % self._deferred.state()

    def done(self, callbacks):
        """See `Deferred.done()`."""
        self._deferred.done(callbacks)

    def fail(self, callbacks):
        """See `Deferred.fail()`."""
        self._deferred.fail(callbacks)

    def progress(self, callbacks):
        """See `Deferred.progress()`."""
        self._deferred.progress(callbacks)

    def always(self, callbacks):
        """See `Deferred.always()`."""
        self._deferred.always(callbacks)

    def then(self, done_filter=None, fail_filter=None, progress_filter=None):
        """See `Deferred.then()`."""
        return self._deferred.then(done_filter, fail_filter, progress_filter)

    def state(self):
        return self._deferred.state()

    def merge_into(self, target):
        """Add the observation methods of this Promise to `target`.

        Args:
            target (object): object accepting new attributes.
        Returns:
            object: the target.
        """
        return extend(target, dict((name, getattr(self, name))
                                   for name in self.OBSERVERS))
