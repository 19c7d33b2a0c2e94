# -*- coding: utf-8 -*-


def is_promise_like(value):
    """Check if an object can be observed like a Promise.

    `when()` uses this function to differentiate values to wait for and plain
    values. Deferred, Promise and any "promisified" object pass the check.

    Returns:
        boolean: True if the value has callable attributes 'done', 'fail' and
            'progress'. False if not.
    """
    return all(callable(getattr(value, name, None))
               for name in ('done', 'fail', 'progress'))


def normalize_callbacks(callbacks):
    """Convert a callback, or a sequence of callbacks, into a list.

    Args:
        callbacks (callable|list|tuple|None)
    Returns:
        list: new list of callables. Empty if `callbacks` is None.
    """
    if callbacks is None:
        return []
    if isinstance(callbacks, (list, tuple)):
        return list(callbacks)
    return [callbacks]


def extend(dest, source):
    """Copy all attributes of `source` into `dest`, then return `dest`.

    If an attribute can't be set, those already copied are removed (or
    restored to their previous value) before the error is raised again.

    Args:
        dest: object receiving the attributes. Must accept new attributes.
        source (dict): attribute names and values.
    Raises:
        AttributeError, TypeError: if `dest` refuses an attribute.
    """
    missing = object()
    attributes = getattr(dest, '__dict__', {})
    previous = []
    try:
        for name, value in source.items():
            previous.append((name, attributes.get(name, missing)))
            setattr(dest, name, value)
    except (AttributeError, TypeError):
        for name, old_value in reversed(previous[:-1]):
            if old_value is missing:
                delattr(dest, name)
            else:
                setattr(dest, name, old_value)
        raise
    return dest
