# -*- coding: utf-8 -*-

from collections import namedtuple
import logging
from threading import Lock

from .common import config
from .dispatch import dispatch, get_default_scheduler
from .promise import Promise
from .util import normalize_callbacks

_logger = logging.getLogger(__name__)


DeferredSnapshot = namedtuple('DeferredSnapshot',
                              ['state', 'scope', 'payload', 'callbacks'])


class Deferred(object):
    """Producer side of an asynchronous operation.

    A Deferred is created by the code who will, at some point, know the
    result of the operation. It's eventually settled (resolved or rejected)
    with a single payload, and can notify progress payloads while it's
    pending. Consumers observe it through the read-only Promise returned by
    `promise()`.

    Callbacks are always called asynchronously, by the scheduler, as
    ``callback(payload, scope)``. The scope is the Deferred itself, unless
    it's been replaced using one of the `*_with()` methods.

    The internal fields are private. Instances are sealed (no new attribute
    can be added); a Deferred created in debug mode can be examined with
    `inspect()`, and logs all its transitions.

    All calls to the methods are thread-safe.
    """

    PENDING = 'pending'
    RESOLVED = 'resolved'
    REJECTED = 'rejected'

    __slots__ = ('_state', '_scope', '_payload', '_callbacks', '_lock',
                 '_debug', '_scheduler', '__weakref__')

    def __init__(self, init=None, debug=None, scheduler=None):
        """Constructor of the Deferred.

        If set, `init` is fully executed before the constructor returns. If
        it raises an exception, the Deferred is rejected with this exception.

        Args:
            init (callable, optional): called with the new Deferred as only
                argument.
            debug (boolean, optional): if True, the Deferred can be inspected
                and logs all its transitions. Default to the 'debug_mode'
                config entry.
            scheduler (Scheduler, optional): scheduler executing the
                callbacks. Default to the process-wide default scheduler.
        """
        self._state = self.PENDING
        self._scope = self
        self._payload = None
        self._callbacks = {
            'done': [],
            'fail': [],
            'always': [],
            'progress': []
        }
        self._lock = Lock()
        if debug is None:
            debug = config.get('debug_mode')
        self._debug = debug
        self._scheduler = scheduler or get_default_scheduler()

        if callable(init):
            try:
                init(self)
            except Exception as error:
                self.reject(error)

    def __repr__(self):
        return 'Deferred(%s)' % self._state

    def state(self):
        """Returns the current state: PENDING, RESOLVED or REJECTED."""
        return self._state

    def _set_state(self, new_state):
        if new_state in (self.PENDING, self.RESOLVED, self.REJECTED):
            self._state = new_state
        return self._state

    def resolve(self, payload=None):
        """Resolve the Deferred, then call the 'done' and 'always' callbacks.

        Has no effect if the Deferred is already settled.
        """
        self._settle(self.RESOLVED, 'done', self._scope, payload)

    def resolve_with(self, scope, payload=None):
        """Resolve the Deferred, using `scope` as the callbacks' scope."""
        self._settle(self.RESOLVED, 'done', scope, payload)

    def reject(self, payload=None):
        """Reject the Deferred, then call the 'fail' and 'always' callbacks.

        Has no effect if the Deferred is already settled.
        """
        self._settle(self.REJECTED, 'fail', self._scope, payload)

    def reject_with(self, scope, payload=None):
        """Reject the Deferred, using `scope` as the callbacks' scope."""
        self._settle(self.REJECTED, 'fail', scope, payload)

    def notify(self, payload=None):
        """Call the 'progress' callbacks, if the Deferred is still pending."""
        self._notify(self._scope, payload)

    def notify_with(self, scope, payload=None):
        """Notify a progress, using `scope` as the callbacks' scope."""
        self._notify(scope, payload)

    def _settle(self, new_state, event, scope, payload):
        with self._lock:
            if self._state != self.PENDING:
                if self._debug:
                    _logger.debug('%r: %s ignored, payload was %r', self,
                                  new_state, payload)
                return
            previous = (self._scope, self._payload)
            self._scope = scope
            self._payload = payload
            self._set_state(new_state)

            callbacks = self._callbacks[event] + self._callbacks['always']
            try:
                dispatch(self._scheduler, scope, payload, callbacks)
            except Exception:
                # The Deferred stays pending, with all its callbacks.
                self._scope, self._payload = previous
                self._set_state(self.PENDING)
                raise

            # Free the references
            for registry in self._callbacks.values():
                del registry[:]

            if self._debug:
                _logger.debug('%r with payload %r', self, payload)

    def _notify(self, scope, payload):
        with self._lock:
            if self._state != self.PENDING:
                if self._debug:
                    _logger.debug('%r: progress ignored, payload was %r',
                                  self, payload)
                return
            dispatch(self._scheduler, scope, payload,
                     list(self._callbacks['progress']))
            self._scope = scope
            self._payload = payload

    def _register(self, event, callbacks, fire_states):
        callbacks = normalize_callbacks(callbacks)
        if not callbacks:
            return

        with self._lock:
            if self._state in fire_states:
                dispatch(self._scheduler, self._scope, self._payload,
                         callbacks)
            elif self._state == self.PENDING:
                self._callbacks[event].extend(callbacks)
            # Otherwise, the event will never happen.

    def done(self, callbacks):
        """Add callbacks called when the Deferred is resolved.

        If the Deferred is already resolved, the callbacks are scheduled
        immediately, with the stored payload and scope.

        Args:
            callbacks (callable|list of callable): each one receives the
                payload and the scope.
        """
        self._register('done', callbacks, (self.RESOLVED,))

    def fail(self, callbacks):
        """Add callbacks called when the Deferred is rejected.

        If the Deferred is already rejected, the callbacks are scheduled
        immediately, with the stored payload and scope.
        """
        self._register('fail', callbacks, (self.REJECTED,))

    def always(self, callbacks):
        """Add callbacks called when the Deferred is settled, in any way."""
        self._register('always', callbacks, (self.RESOLVED, self.REJECTED))

    def progress(self, callbacks):
        """Add callbacks called at each notification.

        Once the Deferred is settled, it has no effect: the last progress
        payload is not replayed.
        """
        self._register('progress', callbacks, ())

    def then(self, done_filter=None, fail_filter=None, progress_filter=None):
        """Create a new Promise from filters applied to this Deferred events.

        When this Deferred is resolved, `done_filter` is called with the
        payload and the scope, and the new Promise is resolved with the value
        returned. The same goes with `fail_filter` (the new Promise is then
        rejected) and `progress_filter` (the new Promise is notified).

        A filter set to None forwards the payload as is. If a filter raises
        an exception, the new Promise is rejected with it.

        Args:
            done_filter (callable, optional)
            fail_filter (callable, optional)
            progress_filter (callable, optional)
        Returns:
            Promise: view of the new Deferred.
        """
        child = Deferred(debug=self._debug, scheduler=self._scheduler)

        def adapter(event_filter, settle):
            def on_event(payload, scope):
                if event_filter is not None:
                    try:
                        payload = event_filter(payload, scope)
                    except Exception as error:
                        return child.reject_with(scope, error)
                settle(scope, payload)
            return on_event

        self.done(adapter(done_filter, child.resolve_with))
        self.fail(adapter(fail_filter, child.reject_with))
        self.progress(adapter(progress_filter, child.notify_with))
        return child.promise()

    def when(self, items):
        """Combine promises and values into a single Promise.

        See `dfd.when.when()`. The new Deferred uses the same scheduler.
        """
        from .when import when  # circular import
        return when(items, scheduler=self._scheduler)

    def promise(self, target=None):
        """Returns the Promise of this Deferred.

        The Promise is the only thing which should be passed to untrusted
        code: it allows to add callbacks, but not to settle the Deferred.

        Args:
            target (object, optional): if set, the observation methods are
                added to this object, which is returned instead of a new
                Promise.
        Returns:
            Promise|object
        """
        view = Promise(self)
        if target is None:
            return view
        try:
            return view.merge_into(target)
        except (AttributeError, TypeError):
            _logger.debug('Unable to promisify %r: it does not accept new '
                          'attributes.', target, exc_info=True)
            return view

    def inspect(self):
        """Returns a copy of the internal fields, for tests and debugging.

        Returns:
            DeferredSnapshot
        Raises:
            RuntimeError: if the Deferred has not been created in debug mode.
        """
        if not self._debug:
            raise RuntimeError('%r has not been created in debug mode.' %
                               self)
        with self._lock:
            callbacks = dict((event, list(registry))
                             for event, registry in self._callbacks.items())
            return DeferredSnapshot(self._state, self._scope, self._payload,
                                    callbacks)
