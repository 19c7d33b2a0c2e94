# -*- coding: utf-8 -*-

from .__version__ import __version__  # noqa

import logging

from .common import config
from .common import log
from .decorators import wrap_promise
from .deferred import Deferred, DeferredSnapshot
from .dispatch import (AsyncioScheduler, ManualScheduler, Scheduler,
                       ThreadScheduler, get_default_scheduler,
                       scheduler_from_name, set_default_scheduler)
from .promise import Promise
from .thread_pool import ThreadPoolExecutor
from .util import is_promise_like
from .when import when

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = ['AsyncioScheduler', 'Deferred', 'DeferredSnapshot',
           'ManualScheduler', 'Promise', 'Scheduler', 'ThreadPoolExecutor',
           'ThreadScheduler', 'configure', 'get_default_scheduler',
           'is_promise_like', 'set_default_scheduler', 'when',
           'wrap_promise']


def configure(config_path=None):
    """Load the config file and apply it.

    Set the log levels of the 'dfd' loggers (the root logger is left
    untouched), and the default scheduler used by new Deferreds.
    The 'debug_mode' entry is read each time a Deferred is created.

    Args:
        config_path (str, optional): path of the config file. Default to
            'dfd.ini' in the user config directory.
    """
    config.load(config_path)
    log.set_debug_mode(config.get('debug_mode'), root=False)
    log.set_logs_level(config.get('log_levels'))
    set_default_scheduler(scheduler_from_name(config.get('scheduler')))
