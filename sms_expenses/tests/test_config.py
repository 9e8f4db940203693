from pathlib import Path

import pytest

from ..config import Settings, load_settings
from ..exceptions import ConfigurationError


ENV_VARS = [
    "SMS_SOURCE",
    "SMS_INBOX_PATH",
    "SMS_MAX_COUNT",
    "SMS_PERMISSION",
    "ADB_PATH",
    "ADB_SERIAL",
    "SMS_FETCH_TIMEOUT",
    "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    # setenv first so teardown also removes anything load_dotenv adds
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


def test_defaults(clean_env):
    assert load_settings(env_file=None) == Settings()


def test_reads_environment(clean_env):
    clean_env.setenv("SMS_SOURCE", "ADB")
    clean_env.setenv("SMS_MAX_COUNT", "250")
    clean_env.setenv("SMS_PERMISSION", "denied")
    clean_env.setenv("ADB_SERIAL", "emulator-5554")
    clean_env.setenv("SMS_FETCH_TIMEOUT", "7.5")
    clean_env.setenv("SMS_INBOX_PATH", "/tmp/dump.json")

    settings = load_settings(env_file=None)

    assert settings.sms_source == "adb"
    assert settings.max_count == 250
    assert settings.permission == "denied"
    assert settings.adb_serial == "emulator-5554"
    assert settings.fetch_timeout == 7.5
    assert settings.inbox_path == Path("/tmp/dump.json")


def test_reads_env_file(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("SMS_MAX_COUNT=10\n", encoding="utf-8")

    assert load_settings(env_file=env_file).max_count == 10


@pytest.mark.parametrize("name, value", [
    ("SMS_SOURCE", "bluetooth"),
    ("SMS_PERMISSION", "maybe"),
    ("SMS_MAX_COUNT", "many"),
    ("SMS_MAX_COUNT", "0"),
    ("SMS_FETCH_TIMEOUT", "-1"),
])
def test_invalid_values(clean_env, name, value):
    clean_env.setenv(name, value)
    with pytest.raises(ConfigurationError):
        load_settings(env_file=None)
