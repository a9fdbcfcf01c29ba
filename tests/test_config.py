import os
from unittest import mock
from servereye_helper import config


def test_settings_defaults():
    # Mock environment to be empty
    with mock.patch.dict(os.environ, {}, clear=True):
        settings = config._read_settings()
        assert settings.SE_API_KEY is None
        assert settings.SE_BASE_URL == "https://api.server-eye.de/2"
        assert settings.SE_TIMEOUT_S == 12.0
        assert settings.SE_MAX_RETRIES == 2
        assert settings.BOT_TOKEN is None
        assert settings.RATE_LIMIT_S == 1.0


def test_settings_custom():
    env = {
        "SE_API_KEY": "key-123",
        "SE_BASE_URL": "https://api.example.test/3/",
        "SE_TIMEOUT_S": "4.5",
        "SE_MAX_RETRIES": "5",
        "BOT_TOKEN": "123:ABC",
        "ALLOWED_CHAT_IDS": "123, 456",
        "RATE_LIMIT_S": "2.5",
    }
    with mock.patch.dict(os.environ, env, clear=True):
        settings = config._read_settings()
        assert settings.SE_API_KEY == "key-123"
        assert settings.SE_BASE_URL == "https://api.example.test/3"
        assert settings.SE_TIMEOUT_S == 4.5
        assert settings.SE_MAX_RETRIES == 5
        assert settings.BOT_TOKEN == "123:ABC"
        assert settings.ALLOWED_CHAT_IDS == {123, 456}
        assert settings.RATE_LIMIT_S == 2.5


def test_settings_invalid_numbers_fall_back():
    env = {"SE_TIMEOUT_S": "soon", "SE_MAX_RETRIES": "many", "RATE_LIMIT_S": "x"}
    with mock.patch.dict(os.environ, env, clear=True):
        settings = config._read_settings()
        assert settings.SE_TIMEOUT_S == 12.0
        assert settings.SE_MAX_RETRIES == 2
        assert settings.RATE_LIMIT_S == 1.0


def test_split_ints_skips_garbage():
    assert config._split_ints("1, x,2,,3") == {1, 2, 3}
