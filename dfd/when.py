# -*- coding: utf-8 -*-

from functools import partial
import logging
from threading import RLock

from .deferred import Deferred
from .util import is_promise_like

_logger = logging.getLogger(__name__)


def when(items, scheduler=None):
    """Create a Promise who waits for a list of promises and values.

    Each item is either promise-like (see `is_promise_like()`), or a plain
    value. A truthy value counts as an already resolved item, a falsy value
    as an already rejected item.

    The resulting Promise is resolved when all the items are resolved, with
    the list of their payloads, keeping the order of the items.
    If an item is rejected, the resulting Promise is rejected, but only after
    all the items are settled, such that the payload (the list of all
    payloads and rejection reasons) is indicative of the status of every
    item.
    Progress notifications of the items are forwarded as is.

    When no item is promise-like, the resulting Promise is settled before
    `when()` returns.

    Args:
        items (list): promises and values.
        scheduler (Scheduler, optional): scheduler of the new Deferred.
    Returns:
        Promise<list>: view of the composite Deferred.
    """
    items = list(items)
    total = len(items)
    composite = Deferred(scheduler=scheduler)

    lock = RLock()
    data = [None] * total
    resolved_count = [0]
    handled_count = [0]

    def check_completion():
        if resolved_count[0] == total:
            composite.resolve(list(data))
        elif handled_count[0] == total:
            composite.reject(list(data))

    def resolve_one_item(index, payload, scope=None):
        with lock:
            data[index] = payload
            resolved_count[0] += 1
            handled_count[0] += 1
            check_completion()

    def reject_one_item(index, payload, scope=None):
        with lock:
            data[index] = payload
            handled_count[0] += 1
            check_completion()

    def forward_progress(payload, scope=None):
        composite.notify(payload)

    with lock:
        for index, item in enumerate(items):
            if is_promise_like(item):
                item.done(partial(resolve_one_item, index))
                item.fail(partial(reject_one_item, index))
                item.progress(forward_progress)
            elif item:
                data[index] = item
                resolved_count[0] += 1
                handled_count[0] += 1
            else:
                data[index] = item
                handled_count[0] += 1

        _logger.debug('when(): %s/%s items already resolved, %s/%s handled',
                      resolved_count[0], total, handled_count[0], total)
        check_completion()

    return composite.promise()
