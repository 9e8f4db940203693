"""Sources for raw inbox records.

Every source answers the same request, ``list_messages(box, max_count)``,
with an ``SmsListResult``: a count plus the records encoded as a JSON
array, the shape the device's SMS capability hands back.
"""
import asyncio
import json
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from ..config import Settings
from ..exceptions import SmsSourceError
from .adb import AdbClient


logger = logging.getLogger(__name__)


# android.provider.Telephony.TextBasedSmsColumns.MESSAGE_TYPE_*
BOX_TYPES = {
    "inbox": 1,
    "sent": 2,
    "draft": 3,
    "outbox": 4,
}


@dataclass
class SmsListResult:
    count: int
    sms_list: str

    def records(self) -> list[dict]:
        try:
            records = json.loads(self.sms_list)
        except json.JSONDecodeError as exc:
            raise SmsSourceError(f"SMS list is not valid JSON: {exc}") from exc
        if not isinstance(records, list):
            raise SmsSourceError("SMS list must be a JSON array")
        return records


def _encode(records: list[dict]) -> SmsListResult:
    return SmsListResult(count=len(records), sms_list=json.dumps(records))


def _check_box(box: str) -> int:
    if box not in BOX_TYPES:
        raise SmsSourceError(f"Unknown SMS box {box!r}")
    return BOX_TYPES[box]


class SmsSource(ABC):
    """The SMS-access capability. Subclasses talk to a concrete store."""

    @abstractmethod
    async def list_messages(self, box: str = "inbox", max_count: int = 1000) -> SmsListResult:
        raise NotImplementedError


class JsonFileSmsSource(SmsSource):
    """Reads an exported message dump (a JSON array of records).

    Records carrying an Android ``type`` column are filtered by box;
    records without one are treated as inbox messages.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> list:
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    async def list_messages(self, box: str = "inbox", max_count: int = 1000) -> SmsListResult:
        box_type = _check_box(box)
        try:
            records = await asyncio.to_thread(self._read)
        except FileNotFoundError as exc:
            raise SmsSourceError(f"SMS dump not found: {self.path}") from exc
        except (OSError, json.JSONDecodeError) as exc:
            raise SmsSourceError(f"Could not read SMS dump {self.path}: {exc}") from exc

        if not isinstance(records, list):
            raise SmsSourceError(f"SMS dump {self.path} must hold a JSON array")

        selected = []
        for record in records:
            record_type = record.get("type", BOX_TYPES["inbox"]) if isinstance(record, dict) else None
            if str(record_type) in (str(box_type), box):
                selected.append(record)
            if len(selected) >= max_count:
                break

        logger.info("[SMS] Read %d %s messages from %s", len(selected), box, self.path)
        return _encode(selected)


ROW_PATTERN = re.compile(
    r"^Row: \d+ _id=(?P<id>.*?), address=(?P<address>.*?), "
    r"date_sent=(?P<date_sent>-?\d+|NULL), body=(?P<body>.*)$"
)


def parse_content_query(output: str) -> list[dict]:
    """Parse ``adb shell content query`` rows into records.

    The projection puts ``body`` last so that commas inside the message
    text stay in the body; lines that do not start a new row continue
    the previous body. Rows without ``date_sent`` are skipped along with
    their continuation lines.
    """

    records: list[dict] = []
    lines = output.splitlines()
    if not lines or lines[0].strip() == "No result found.":
        return records

    current = None
    seen_row = False
    for line in lines:
        match = ROW_PATTERN.match(line)
        if match:
            seen_row = True
            if match.group("date_sent") == "NULL":
                logger.warning("[SMS] Skipping row _id=%s without date_sent", match.group("id"))
                current = None
                continue
            address = match.group("address")
            current = {
                "_id": match.group("id"),
                "address": None if address == "NULL" else address,
                "date_sent": int(match.group("date_sent")),
                "body": match.group("body"),
            }
            records.append(current)
        elif current is not None:
            current["body"] += "\n" + line
        elif not seen_row and line.strip():
            raise SmsSourceError(f"Unexpected content query output: {line.strip()}")

    return records


class AdbSmsSource(SmsSource):
    """Lists messages from a connected Android device's SMS provider."""

    PROJECTION = "_id:address:date_sent:body"

    def __init__(self, client: AdbClient):
        self.client = client

    async def list_messages(self, box: str = "inbox", max_count: int = 1000) -> SmsListResult:
        _check_box(box)
        try:
            result = await self.client.run(
                "shell", "content", "query",
                "--uri", f"content://sms/{box}",
                "--projection", self.PROJECTION,
            )
        except OSError as exc:
            raise SmsSourceError(f"Could not run adb: {exc}") from exc

        if result.returncode != 0:
            detail = result.stderr.strip() or result.stdout.strip()
            raise SmsSourceError(f"adb content query failed ({result.returncode}): {detail}")

        records = parse_content_query(result.stdout)[:max_count]
        logger.info("[SMS] Read %d %s messages over adb", len(records), box)
        return _encode(records)


def build_sms_source(settings: Settings) -> SmsSource:
    if settings.sms_source == "adb":
        return AdbSmsSource(AdbClient(settings.adb_path, settings.adb_serial))
    return JsonFileSmsSource(settings.inbox_path)
