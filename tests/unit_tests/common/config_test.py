# -*- coding: utf-8 -*-

import logging
import pytest

import dfd
from dfd import (AsyncioScheduler, ThreadScheduler, get_default_scheduler,
                 set_default_scheduler)
from dfd.common import config
from dfd.common import log


@pytest.fixture
def config_file(tmp_path, request):
    """Path of a temporary config file, forgotten at the end of the test."""
    def restore():
        config.reset()
        log.set_debug_mode(False)
        logging.getLogger().setLevel(logging.WARNING)
        logging.getLogger('dfd').setLevel(logging.NOTSET)
        set_default_scheduler(None)

    request.addfinalizer(restore)
    config.reset()
    return tmp_path / 'dfd.ini'


class TestConfigLoad(object):

    def test_load_without_file(self, config_file, caplog):
        config.load(str(config_file))
        assert any(r.levelno == logging.WARNING and r.name == config.__name__
                   for r in caplog.records)
        assert config.get('debug_mode') is False

    def test_load_existing_file(self, config_file, caplog):
        config_file.write_text('[config]\n'
                               'debug_mode = true\n'
                               'scheduler = asyncio\n')
        config.load(str(config_file))
        assert not any(r.levelno >= logging.WARNING for r in caplog.records)
        assert config.get('debug_mode') is True
        assert config.get('scheduler') == 'asyncio'


class TestConfigGet(object):

    def test_key_does_not_exist(self, config_file):
        with pytest.raises(KeyError):
            config.get('plop')

    def test_default_values(self, config_file):
        assert config.get('debug_mode') is False
        assert config.get('log_levels') == {}
        assert config.get('scheduler') == 'thread'

    def test_invalid_bool_value(self, config_file):
        config_file.write_text('[config]\ndebug_mode = maybe\n')
        config.load(str(config_file))
        assert config.get('debug_mode') is False

    def test_dict_value(self, config_file):
        config_file.write_text('[config]\n'
                               'log_levels = dfd=info; dfd.dispatch=debug;'
                               'invalid\n')
        config.load(str(config_file))
        assert config.get('log_levels') == {'dfd': 'info',
                                             'dfd.dispatch': 'debug'}


class TestConfigSet(object):

    def test_set_unknown_key(self, config_file):
        with pytest.raises(KeyError):
            config.set('plop', 42)

    def test_set_writes_the_file(self, config_file):
        config.load(str(config_file))
        config.set('debug_mode', True)
        config.set('log_levels', {'dfd.when': 'debug'})

        assert 'debug_mode = True' in config_file.read_text()
        config.reset()
        config.load(str(config_file))
        assert config.get('debug_mode') is True
        assert config.get('log_levels') == {'dfd.when': 'debug'}


class TestConfigure(object):

    def test_configure_applies_the_file(self, config_file):
        config_file.write_text('[config]\n'
                               'debug_mode = true\n'
                               'log_levels = dfd.dispatch=warning\n'
                               'scheduler = asyncio\n')
        dfd.configure(str(config_file))

        assert logging.getLogger('dfd').level == logging.DEBUG
        assert logging.getLogger('dfd.dispatch').level == logging.WARNING
        assert isinstance(get_default_scheduler(), AsyncioScheduler)
        logging.getLogger('dfd.dispatch').setLevel(logging.NOTSET)

    def test_debug_mode_is_the_deferred_default(self, config_file):
        config_file.write_text('[config]\ndebug_mode = true\n')
        dfd.configure(str(config_file))
        assert isinstance(get_default_scheduler(), ThreadScheduler)

        df = dfd.Deferred()
        assert df.inspect().state == dfd.Deferred.PENDING

    def test_configure_leaves_the_root_logger_alone(self, config_file):
        logging.getLogger().setLevel(logging.ERROR)
        config_file.write_text('[config]\ndebug_mode = true\n')
        dfd.configure(str(config_file))

        assert logging.getLogger('dfd').level == logging.DEBUG
        assert logging.getLogger().level == logging.ERROR

        config_file.write_text('[config]\ndebug_mode = false\n')
        config.reset()
        dfd.configure(str(config_file))
        assert logging.getLogger('dfd').level == logging.INFO
        assert logging.getLogger().level == logging.ERROR
