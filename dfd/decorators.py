# -*- coding: utf-8 -*-

from functools import wraps

from .deferred import Deferred
from .util import is_promise_like


def wrap_promise(f):
    """Decorator who converts the result in a Promise object.

    If the function decorated returns a promise-like object, it's transmitted
    as is. Else, a new Deferred is resolved with the returned value, and its
    Promise is returned. If the function raises an exception, the Promise is
    rejected with it.
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        df = Deferred()
        try:
            result = f(*args, **kwargs)
        except Exception as error:
            df.reject(error)
        else:
            if is_promise_like(result):
                return result
            df.resolve(result)
        return df.promise()

    return wrapper
