from decimal import Decimal

import pytest

from toystock.core.exceptions import StoreError
from toystock.repositories.stock_repository import StockRepository
from toystock.services.normalizer import StockDraft


def _draft(user, code, price="5", quantity=10, name=None):
    return StockDraft(
        user_id=user.id,
        item_name=name or f"Toy {code}",
        item_code=code,
        purchase_price=Decimal(price),
        selling_price=Decimal("9.99"),
        quantity=quantity,
    )


def test_insert_assigns_id_timestamp_and_value(conn, user):
    record = StockRepository(conn).insert(_draft(user, "RC-01", price="2.5", quantity=4))

    assert record.id
    assert record.created_at is not None
    assert record.user_id == user.id
    assert record.stock_value == Decimal("10.00")
    assert record.selling_price == Decimal("9.99")


def test_select_all_is_oldest_first_and_scoped_to_owner(conn, user, other_user):
    repo = StockRepository(conn)
    repo.insert(_draft(user, "A"))
    repo.insert(_draft(other_user, "X"))
    repo.insert_many([_draft(user, "B"), _draft(user, "C")])

    assert [r.item_code for r in repo.select_all(user.id)] == ["A", "B", "C"]
    assert [r.item_code for r in repo.select_all(other_user.id)] == ["X"]


def test_duplicate_codes_are_allowed(conn, user):
    repo = StockRepository(conn)
    repo.insert_many([_draft(user, "DUP"), _draft(user, "DUP")])
    assert len(repo.select_all(user.id)) == 2


def test_insert_many_is_all_or_nothing(conn, user):
    repo = StockRepository(conn)
    bad = _draft(user, "NEG", price="-1")

    with pytest.raises(StoreError):
        repo.insert_many([_draft(user, "OK-1"), bad, _draft(user, "OK-2")])

    assert repo.select_all(user.id) == []


def test_store_failures_are_opaque(conn, user):
    conn.execute("ALTER TABLE stocks RENAME TO stocks_gone")
    try:
        repo = StockRepository(conn)
        with pytest.raises(StoreError):
            repo.select_all(user.id)
        with pytest.raises(StoreError):
            repo.insert(_draft(user, "A"))
    finally:
        conn.execute("ALTER TABLE stocks_gone RENAME TO stocks")
        conn.commit()


def test_insert_many_rolls_back_when_a_quantity_cannot_be_bound(conn, user):
    repo = StockRepository(conn)
    too_many = _draft(user, "BIG", quantity=10**20)

    with pytest.raises(StoreError):
        repo.insert_many([_draft(user, "OK-1"), too_many])
    conn.rollback()

    assert repo.select_all(user.id) == []


def test_insert_reports_unbindable_quantity_as_store_error(conn, user):
    with pytest.raises(StoreError):
        StockRepository(conn).insert(_draft(user, "BIG", quantity=10**20))
