"""Runtime settings, read from the environment (and an optional .env file)."""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError


ENV_PATH = Path(__file__).parent / ".env"

SMS_SOURCES = ("json", "adb")
PERMISSION_MODES = ("granted", "denied", "adb")
DEFAULT_MAX_COUNT = 1000


@dataclass(frozen=True)
class Settings:
    sms_source: str = "json"
    inbox_path: Path = Path("inbox.json")
    max_count: int = DEFAULT_MAX_COUNT
    permission: str = "granted"
    adb_path: str = "adb"
    adb_serial: Optional[str] = None
    fetch_timeout: Optional[float] = None
    log_level: str = "INFO"


def _choice(name: str, default: str, choices: tuple) -> str:
    value = os.getenv(name, default).strip().lower()
    if value not in choices:
        raise ConfigurationError(
            f"{name} must be one of {', '.join(choices)}, got {value!r}"
        )
    return value


def _positive_number(name: str, default: Optional[str], cast):
    raw = os.getenv(name, default)
    if raw is None or raw.strip() == "":
        return None
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def load_settings(env_file: Optional[Path] = ENV_PATH) -> Settings:
    """Build ``Settings`` from environment variables.

    Values already present in the environment win over the ``.env`` file.

    Raises:
        ConfigurationError: if a variable holds an unsupported value
    """

    if env_file is not None and env_file.exists():
        load_dotenv(dotenv_path=env_file, override=False)

    return Settings(
        sms_source=_choice("SMS_SOURCE", "json", SMS_SOURCES),
        inbox_path=Path(os.getenv("SMS_INBOX_PATH", "inbox.json")),
        max_count=_positive_number("SMS_MAX_COUNT", None, int) or DEFAULT_MAX_COUNT,
        permission=_choice("SMS_PERMISSION", "granted", PERMISSION_MODES),
        adb_path=os.getenv("ADB_PATH", "adb"),
        adb_serial=os.getenv("ADB_SERIAL") or None,
        fetch_timeout=_positive_number("SMS_FETCH_TIMEOUT", None, float),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
