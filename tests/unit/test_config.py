import logging

import pytest

from core import config as config_module
from core.config import CheckerConfig, Config, ConfigManager, validate_config
from core.env_loader import get_env_bool, get_env_var, load_env_file
from core.exceptions import ConfigurationError

CONFIG_VARS = ['CHECK_TIMEOUT', 'CONCURRENT_CHECKS', 'MAX_RETRIES', 'RETRY_DELAY_MS', 'CHECK_USER_AGENT',
               'FOLLOW_REDIRECTS', 'PAGE_TIMEOUT', 'LOG_LEVEL', 'VERBOSE_LOGGING', 'SLACK_WEBHOOK_URL']


@pytest.fixture
def clean_env(monkeypatch):
    for name in CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)
    yield monkeypatch
    config_module.reset_config()


def make_manager():
    return ConfigManager(env_file_path="does-not-exist.env")


def test_defaults(clean_env):
    config = make_manager().get_config()

    assert config.checker.check_timeout == 10.0
    assert config.checker.concurrent_checks == 5
    assert config.checker.max_retries == 1
    assert config.checker.retry_delay == 0.5
    assert config.checker.follow_redirects is True
    assert config.has_slack() is False


def test_environment_overrides(clean_env):
    clean_env.setenv('CHECK_TIMEOUT', '2.5')
    clean_env.setenv('CONCURRENT_CHECKS', '12')
    clean_env.setenv('MAX_RETRIES', '0')
    clean_env.setenv('RETRY_DELAY_MS', '250')
    clean_env.setenv('FOLLOW_REDIRECTS', 'false')
    clean_env.setenv('LOG_LEVEL', 'debug')
    clean_env.setenv('SLACK_WEBHOOK_URL', 'https://hooks.slack.test/abc')

    manager = make_manager()
    config = manager.get_config()

    assert config.checker.check_timeout == 2.5
    assert config.checker.concurrent_checks == 12
    assert config.checker.max_retries == 0
    assert config.checker.retry_delay == 0.25
    assert config.checker.follow_redirects is False
    assert config.checker.log_level == 'DEBUG'
    assert manager.get_integration_status() == {'slack_webhook': True}


@pytest.mark.parametrize("name,value", [
    ('CONCURRENT_CHECKS', '0'),
    ('CONCURRENT_CHECKS', 'many'),
    ('MAX_RETRIES', '-1'),
    ('CHECK_TIMEOUT', '0'),
    ('RETRY_DELAY_MS', '-5'),
    ('LOG_LEVEL', 'LOUD'),
])
def test_invalid_environment_raises_configuration_error(clean_env, name, value):
    clean_env.setenv(name, value)

    with pytest.raises(ConfigurationError):
        make_manager().get_config()


def test_config_is_cached_until_force_reload(clean_env):
    manager = make_manager()
    first = manager.get_config()
    clean_env.setenv('CONCURRENT_CHECKS', '9')

    assert manager.get_config() is first
    assert manager.get_config(force_reload=True).checker.concurrent_checks == 9


def test_with_overrides_ignores_none_and_validates():
    base = Config()

    updated = base.with_overrides(concurrent_checks=3, max_retries=None)

    assert updated.checker.concurrent_checks == 3
    assert updated.checker.max_retries == base.checker.max_retries
    assert base.checker.concurrent_checks == 5
    with pytest.raises(ConfigurationError):
        base.with_overrides(concurrent_checks=0)


def test_validate_config_collects_every_problem():
    config = Config(checker=CheckerConfig(concurrent_checks=0, max_retries=99))

    with pytest.raises(ConfigurationError) as exc_info:
        validate_config(config)

    assert "CONCURRENT_CHECKS" in exc_info.value.context['issue']
    assert "MAX_RETRIES" in exc_info.value.context['issue']


def test_global_manager_is_reset(clean_env):
    first = config_module.get_config_manager()
    assert config_module.get_config_manager() is first

    config_module.reset_config()

    assert config_module.get_config_manager() is not first


def test_update_logging_verbose_sets_debug(clean_env):
    root = logging.getLogger()
    previous = root.level
    try:
        make_manager().update_logging(verbose=True)
        assert root.level == logging.DEBUG
    finally:
        root.setLevel(previous)


def test_load_env_file_does_not_override_existing(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text(
        "# comment\nLINKCHECK_TEST_A='quoted'\nLINKCHECK_TEST_B=from-file\nnot a pair\n",
        encoding="utf-8"
    )
    monkeypatch.delenv('LINKCHECK_TEST_A', raising=False)
    monkeypatch.setenv('LINKCHECK_TEST_B', 'from-env')

    loaded = load_env_file(".env", root=tmp_path)

    assert loaded == 1
    assert get_env_var('LINKCHECK_TEST_A') == 'quoted'
    assert get_env_var('LINKCHECK_TEST_B') == 'from-env'
    monkeypatch.delenv('LINKCHECK_TEST_A')


def test_env_helpers(monkeypatch):
    monkeypatch.setenv('LINKCHECK_FLAG', 'Yes')
    monkeypatch.delenv('LINKCHECK_MISSING', raising=False)

    assert get_env_bool('LINKCHECK_FLAG') is True
    assert get_env_bool('LINKCHECK_MISSING', default=True) is True
    with pytest.raises(ValueError):
        get_env_var('LINKCHECK_MISSING', required=True)
