from typing import Iterable

from ..models import ParsedTransaction, TransactionCard


CURRENCY_SYMBOL = "₹"

AMOUNT_COLORS = {
    "credited": "#11A311",
    "debited": "#B40000",
}


def matches_direction(transaction: ParsedTransaction, direction: str) -> bool:
    if direction == "all":
        return True
    return transaction.type == direction


def matches_search(transaction: ParsedTransaction, query: str) -> bool:
    """Case-insensitive match on body/sender, literal match on the amount."""

    query_lower = query.lower()
    return (
        query_lower in transaction.body.lower()
        or query_lower in transaction.sender.lower()
        or query in transaction.amount
    )


def filter_transactions(
    transactions: Iterable[ParsedTransaction],
    direction: str = "all",
    query: str = "",
) -> list[ParsedTransaction]:
    """Return the transactions passing both the direction and search filters.

    The input is never modified; callers re-run this on every render.
    """

    return [
        transaction
        for transaction in transactions
        if matches_direction(transaction, direction) and matches_search(transaction, query)
    ]


def render_card(transaction: ParsedTransaction) -> TransactionCard:
    return TransactionCard(
        id=transaction.id,
        initial=transaction.sender[:1],
        sender=transaction.sender,
        body=transaction.body,
        date=transaction.date,
        time_ago=transaction.time_ago,
        type=transaction.type,
        amount_label=f"{CURRENCY_SYMBOL}{transaction.amount}",
        color=AMOUNT_COLORS[transaction.type],
    )
