"""
Demo data seeder – inserts a handful of toys for a demo owner.

⚠️  FOR DEVELOPMENT ONLY.
    Runs on startup only when SEED_DEMO_DATA is enabled.
"""
from decimal import Decimal
import logging

from toystock.db.database import get_db
from toystock.repositories.stock_repository import StockRepository
from toystock.services.normalizer import StockDraft

logger = logging.getLogger(__name__)

DEMO_USER_ID = "demo-user"

# ---------------------------------------------------------------------------
# Mock data
# ---------------------------------------------------------------------------

MOCK_STOCKS = [
    {"item_name": "Red Racing Car", "item_code": "RC-01", "purchase_price": "5.00", "selling_price": "8.00", "quantity": 10},
    {"item_name": "Plush Teddy Bear", "item_code": "TB-12", "purchase_price": "7.50", "selling_price": "12.99", "quantity": 6},
    {"item_name": "Wooden Puzzle", "item_code": "WP-03", "purchase_price": "3.25", "selling_price": "5.99", "quantity": 20},
    {"item_name": "Building Blocks 100pc", "item_code": "BB-100", "purchase_price": "11.40", "selling_price": "19.99", "quantity": 4},
    {"item_name": "Rubber Duck", "item_code": "RD-07", "purchase_price": "0.80", "selling_price": "1.50", "quantity": 50},
]


def seed_demo_stocks(user_id: str = DEMO_USER_ID) -> int:
    """
    Insert the demo stocks for *user_id* unless that user already has stocks.
    Returns the number of rows inserted.
    """
    with get_db() as conn:
        repo = StockRepository(conn)
        if repo.select_all(user_id):
            logger.info("Demo seeder: stocks already present for %s, skipping", user_id)
            return 0

        drafts = [
            StockDraft(
                user_id=user_id,
                item_name=item["item_name"],
                item_code=item["item_code"],
                purchase_price=Decimal(item["purchase_price"]),
                selling_price=Decimal(item["selling_price"]),
                quantity=item["quantity"],
            )
            for item in MOCK_STOCKS
        ]
        inserted = repo.insert_many(drafts)
    logger.info("Demo seeder: inserted %s stocks for %s", inserted, user_id)
    return inserted
