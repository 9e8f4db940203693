"""Turn raw inbox records into debit/credit transactions.

Only messages whose body mentions ``debited`` or ``credited`` are kept.
Matching is case-sensitive, the same way bank templates spell it.
"""
import logging
import re
import time
from datetime import datetime
from typing import Iterable, Optional

from pydantic import ValidationError

from ..models import ParsedTransaction, RawMessage


logger = logging.getLogger(__name__)


# "Rs. 250.50", "Rs 500", "Rs500", "Rs.99.9"
AMOUNT_PATTERN = re.compile(r"Rs\.?\s?(\d+(\.\d{1,2})?)")

DEBIT_KEYWORD = "debited"
CREDIT_KEYWORD = "credited"
UNKNOWN = "Unknown"

_MS_PER_MINUTE = 60 * 1000


def now_ms() -> int:
    return int(time.time() * 1000)


def is_transaction_message(body: str) -> bool:
    return DEBIT_KEYWORD in body or CREDIT_KEYWORD in body


def parse_amount(body: str) -> str:
    """Return the first rupee amount in ``body`` as written, or "Unknown"."""

    match = AMOUNT_PATTERN.search(body)
    if not match:
        return UNKNOWN
    return match.group(1)


def transaction_type(body: str) -> str:
    # "credited" is the fallback, even when both keywords appear
    return DEBIT_KEYWORD if DEBIT_KEYWORD in body else CREDIT_KEYWORD


def _unit(count: int, name: str) -> str:
    return f"{count} {name}{'s' if count > 1 else ''} ago"


def time_ago(date_sent: int, now: Optional[int] = None) -> str:
    """Describe how long ago ``date_sent`` (epoch ms) was.

    Uses the largest whole unit among days, hours and minutes. Anything
    under a minute, including timestamps slightly in the future, is
    "Just now".
    """

    if now is None:
        now = now_ms()

    minutes = (now - date_sent) // _MS_PER_MINUTE
    hours = minutes // 60
    days = hours // 24

    if days > 0:
        return _unit(days, "day")
    if hours > 0:
        return _unit(hours, "hour")
    if minutes > 0:
        return _unit(minutes, "minute")
    return "Just now"


def format_date(date_sent: int) -> str:
    """Local calendar date of an epoch-ms timestamp, in the locale's format."""

    return datetime.fromtimestamp(date_sent / 1000).strftime("%x")


def parse_message(message: RawMessage, now: Optional[int] = None) -> ParsedTransaction:
    return ParsedTransaction(
        id=message.id,
        body=message.body,
        amount=parse_amount(message.body),
        date=format_date(message.date_sent),
        time_ago=time_ago(message.date_sent, now),
        type=transaction_type(message.body),
        sender=message.address or UNKNOWN,
    )


def parse_inbox(records: Iterable[dict], now: Optional[int] = None) -> list[ParsedTransaction]:
    """Parse every debit/credit notification in ``records``.

    Records the device returns without the fields we need are skipped
    with a warning rather than failing the whole inbox.
    """

    if now is None:
        now = now_ms()

    transactions: list[ParsedTransaction] = []
    skipped = 0
    for record in records:
        try:
            message = RawMessage.model_validate(record)
        except ValidationError as exc:
            skipped += 1
            record_id = record.get("_id") if isinstance(record, dict) else None
            logger.warning("[SMS] Skipping malformed record %r: %s", record_id, exc)
            continue

        if not is_transaction_message(message.body):
            continue
        try:
            transactions.append(parse_message(message, now))
        except (OverflowError, OSError, ValueError) as exc:
            # date_sent outside what the platform clock can represent
            skipped += 1
            logger.warning("[SMS] Skipping record %r with bad date_sent: %s", message.id, exc)

    logger.info(
        "[SMS] Parsed %d transactions (%d malformed records skipped)",
        len(transactions),
        skipped,
    )
    return transactions
