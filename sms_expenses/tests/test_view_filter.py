import pytest
from pydantic import ValidationError

from ..models import ParsedTransaction
from ..services.view_filter import filter_transactions, matches_search, render_card


def make_transaction(id, body, amount, type, sender="VM-HDFCBK"):
    return ParsedTransaction(
        id=id,
        body=body,
        amount=amount,
        date="11/14/23",
        time_ago="Just now",
        type=type,
        sender=sender,
    )


TRANSACTIONS = [
    make_transaction("1", "Rs 500 debited at SWIGGY", "500", "debited"),
    make_transaction("2", "Rs 500 credited by NEFT", "500", "credited"),
    make_transaction("3", "Rs 1200 credited salary", "1200", "credited", sender="AD-ICICIB"),
    make_transaction("4", "debited, amount not shown", "Unknown", "debited", sender="Unknown"),
]


def test_all_with_empty_search_passes_everything():
    assert filter_transactions(TRANSACTIONS) == TRANSACTIONS


def test_direction_filter():
    assert [t.id for t in filter_transactions(TRANSACTIONS, "credited")] == ["2", "3"]
    assert [t.id for t in filter_transactions(TRANSACTIONS, "debited")] == ["1", "4"]


def test_direction_and_search_compose():
    visible = filter_transactions(TRANSACTIONS, "credited", "500")
    assert [t.id for t in visible] == ["2"]


def test_search_is_case_insensitive_on_body_and_sender():
    assert [t.id for t in filter_transactions(TRANSACTIONS, "all", "swiggy")] == ["1"]
    assert [t.id for t in filter_transactions(TRANSACTIONS, "all", "icicib")] == ["3"]


def test_search_uses_literal_query_on_amount():
    transaction = make_transaction("5", "no keyword here", "Unknown", "debited", sender="X")
    assert matches_search(transaction, "Unknown")
    assert not matches_search(transaction, "unknown")


def test_filtering_leaves_input_untouched():
    before = list(TRANSACTIONS)
    filter_transactions(TRANSACTIONS, "debited", "zzz")
    assert TRANSACTIONS == before


def test_transactions_are_immutable():
    with pytest.raises(ValidationError):
        TRANSACTIONS[0].amount = "1"


def test_render_card_colors_and_label():
    debit = render_card(TRANSACTIONS[0])
    credit = render_card(TRANSACTIONS[2])

    assert debit.initial == "V"
    assert debit.amount_label == "₹500"
    assert debit.color == "#B40000"
    assert credit.initial == "A"
    assert credit.color == "#11A311"
