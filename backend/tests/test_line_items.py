from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from app.services.line_items import (
    as_number,
    build_line_item_patch,
    create_manual_line_item,
    delete_line_item,
    update_line_item,
)
from app.services.stores import QuoteStores
from app.utils.errors import (
    LineItemNotFoundError,
    LineItemValidationError,
    QuoteLockedError,
)


def make_stores(state="draft", items=None):
    items = dict(items or {})
    stores = QuoteStores(
        quotes=MagicMock(),
        results=MagicMock(),
        line_items=MagicMock(),
        adjustments=MagicMock(),
        activity=MagicMock(),
    )
    stores.quotes.get.return_value = {"quote_id": "q1", "quote_state": state}
    stores.line_items.get.side_effect = lambda quote_id, item_id: items.get(item_id)

    def _update(quote_id, item_id, fields):
        items[item_id] = {**items[item_id], **fields}
        return items[item_id]

    def _insert(quote_id, fields):
        items["new"] = {"id": "new", "quote_id": quote_id, **fields}
        return items["new"]

    stores.line_items.update.side_effect = _update
    stores.line_items.insert.side_effect = _insert
    stores.line_items.list_for_quote.side_effect = lambda quote_id: list(items.values())
    stores.line_items.delete.side_effect = lambda quote_id, item_id: items.pop(item_id, None) is not None
    stores.adjustments.list_for_quote.return_value = []
    return stores


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("3", Decimal("3")),
        (" 2.5 ", Decimal("2.5")),
        (4, Decimal("4")),
        ("", None),
        (None, None),
        ("abc", None),
        ("NaN", None),
        (True, None),
    ],
)
def test_as_number(raw, expected):
    assert as_number(raw) == expected


def test_patch_keeps_only_present_editable_fields():
    patch = build_line_item_patch(
        {"billable_pages": "4", "unit_rate_override": "", "override_reason": "", "id": "x"}
    )
    assert patch == {
        "billable_pages": Decimal("4"),
        "unit_rate_override": None,
        "override_reason": None,
    }


def test_update_on_locked_quote_writes_nothing():
    stores = make_stores(state="sent", items={"li-1": {"id": "li-1"}})
    with pytest.raises(QuoteLockedError):
        update_line_item(stores, "q1", "li-1", {"billable_pages": 9}, "admin-1")
    stores.line_items.update.assert_not_called()
    stores.quotes.update.assert_not_called()
    stores.results.upsert.assert_not_called()
    stores.activity.log.assert_not_called()


def test_update_unknown_line_item():
    stores = make_stores(items={})
    with pytest.raises(LineItemNotFoundError):
        update_line_item(stores, "q1", "missing", {"billable_pages": 2})
    stores.line_items.update.assert_not_called()


def test_update_recomputes_line_and_quote_totals():
    item = {
        "id": "li-1",
        "billable_pages": Decimal("2"),
        "unit_rate": Decimal("30"),
        "unit_rate_override": None,
        "certification_amount": Decimal("10"),
    }
    stores = make_stores(items={"li-1": item})

    mutation = update_line_item(
        stores, "q1", "li-1", {"billable_pages": "3", "unit_rate_override": "25"}, "admin-1"
    )

    assert mutation.line_item["line_total"] == Decimal("85.00")
    assert mutation.totals.subtotal == Decimal("85.00")
    assert mutation.totals.tax == Decimal("4.25")
    assert mutation.totals.total == Decimal("89.25")
    stamp = stores.quotes.update.call_args.args[1]
    assert stamp["last_edited_by"] == "admin-1"
    stores.results.upsert.assert_called_once()
    action = stores.activity.log.call_args.args[0]
    assert action == "quote_line_item_updated"


def test_update_succeeds_when_activity_log_fails():
    stores = make_stores(items={"li-1": {"id": "li-1", "billable_pages": 1, "unit_rate": 10}})
    stores.activity.log.side_effect = RuntimeError("audit down")
    mutation = update_line_item(stores, "q1", "li-1", {"unit_rate": 12})
    assert mutation.totals.subtotal == Decimal("12.00")


def test_create_manual_line_item():
    stores = make_stores(items={})
    mutation = create_manual_line_item(
        stores,
        "q1",
        {"filename": "passport.pdf", "billable_pages": 3, "unit_rate": "25"},
        "admin-1",
    )
    row = mutation.line_item
    assert row["source"] == "manual"
    assert row["doc_type"] == "passport.pdf"
    assert row["line_total"] == Decimal("75.00")
    assert row["certification_amount"] == Decimal("0")
    assert mutation.totals.tax == Decimal("3.75")
    assert mutation.totals.total == Decimal("78.75")
    stores.activity.log.assert_called_once()
    assert stores.activity.log.call_args.args[0] == "quote_line_item_created"


def test_create_manual_line_item_defaults_doc_type():
    stores = make_stores(items={})
    mutation = create_manual_line_item(stores, "q1", {"billable_pages": 1, "unit_rate": 40})
    assert mutation.line_item["doc_type"] == "Document"


@pytest.mark.parametrize(
    "fields, bad_field",
    [
        ({"unit_rate": 25}, "billable_pages"),
        ({"billable_pages": 0, "unit_rate": 25}, "billable_pages"),
        ({"billable_pages": "abc", "unit_rate": 25}, "billable_pages"),
        ({"billable_pages": 2}, "unit_rate"),
        ({"billable_pages": 2, "unit_rate": -5}, "unit_rate"),
    ],
)
def test_create_manual_line_item_validation(fields, bad_field):
    stores = make_stores(items={})
    with pytest.raises(LineItemValidationError) as excinfo:
        create_manual_line_item(stores, "q1", fields)
    assert excinfo.value.field == bad_field
    assert excinfo.value.field_errors == {bad_field: "required"}
    stores.line_items.insert.assert_not_called()


def test_create_manual_line_item_on_locked_quote():
    stores = make_stores(state="accepted", items={})
    with pytest.raises(QuoteLockedError):
        create_manual_line_item(stores, "q1", {"billable_pages": 1, "unit_rate": 10})
    stores.line_items.insert.assert_not_called()


def test_delete_line_item_recomputes_totals():
    stores = make_stores(
        items={
            "a": {"id": "a", "billable_pages": 1, "unit_rate": 10},
            "b": {"id": "b", "billable_pages": 2, "unit_rate": 10},
        }
    )
    totals = delete_line_item(stores, "q1", "b", "admin-1")
    assert totals.subtotal == Decimal("10.00")
    assert stores.activity.log.call_args.args[0] == "quote_line_item_deleted"


def test_delete_unknown_line_item():
    stores = make_stores(items={})
    with pytest.raises(LineItemNotFoundError):
        delete_line_item(stores, "q1", "nope")
    stores.results.upsert.assert_not_called()


def test_manual_line_total_uses_column_scale():
    stores = make_stores(items={})
    mutation = create_manual_line_item(stores, "q1", {"billable_pages": "2.555", "unit_rate": "10"})
    row = mutation.line_item
    assert row["billable_pages"] == Decimal("2.56")
    assert row["line_total"] == Decimal("25.60")
    assert mutation.totals.subtotal == row["line_total"]


def test_update_rounds_patch_before_line_total():
    stores = make_stores(items={"li-1": {"id": "li-1", "billable_pages": 1, "unit_rate": 10}})
    mutation = update_line_item(stores, "q1", "li-1", {"billable_pages": "1.005", "unit_rate": "19.999"})
    row = mutation.line_item
    assert row["billable_pages"] == Decimal("1.01")
    assert row["unit_rate"] == Decimal("20.00")
    assert row["line_total"] == Decimal("20.20")
    assert mutation.totals.subtotal == Decimal("20.20")


def test_update_requires_line_item_id_and_updates():
    stores = make_stores(items={"li-1": {"id": "li-1"}})
    with pytest.raises(LineItemValidationError) as excinfo:
        update_line_item(stores, "q1", None, {"billable_pages": 2})
    assert excinfo.value.field == "line_item_id"
    with pytest.raises(LineItemValidationError) as excinfo:
        update_line_item(stores, "q1", "li-1", None)
    assert excinfo.value.field == "updates"
    stores.line_items.update.assert_not_called()


def test_lock_is_checked_before_missing_fields():
    stores = make_stores(state="sent", items={})
    with pytest.raises(QuoteLockedError):
        update_line_item(stores, "q1", None, None)
