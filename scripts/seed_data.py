import argparse
from datetime import date, timedelta

from sqlalchemy import delete, select

from inventory_tracker.config import get_settings
from inventory_tracker.core.constants import ENTRIES, EXITS, PRODUCTS
from inventory_tracker.core.logging import setup_logging
from inventory_tracker.database import Base, engine, ensure_sqlite_schema, session_scope
from inventory_tracker.models import import_all_models
from inventory_tracker.models.product import Product
from inventory_tracker.models.stock_entry import StockEntry
from inventory_tracker.models.stock_exit import StockExit
from inventory_tracker.services.persistence_gateway import PersistenceGateway


def parse_args():
    parser = argparse.ArgumentParser(description="Seed sample inventory data.")
    parser.add_argument(
        "--user",
        default=None,
        help="User id that owns the sample data (default: DEFAULT_USER_ID).",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear the user's existing data before seeding.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()
    user_id = args.user or get_settings().DEFAULT_USER_ID

    import_all_models()
    Base.metadata.create_all(bind=engine)
    ensure_sqlite_schema()

    with session_scope() as db:
        if args.reset:
            for model in (StockEntry, StockExit, Product):
                db.execute(delete(model).where(model.user_id == user_id))
            db.commit()

        has_product = db.execute(
            select(Product.id).where(Product.user_id == user_id).limit(1)
        ).first()
        if has_product:
            print("Seed skipped: products already exist for {}.".format(user_id))
            return

        gateway = PersistenceGateway(db, user_id)
        gloves, masks, gauze = gateway.add_multiple(
            PRODUCTS,
            [
                {
                    "name": "Luva Nitrílica",
                    "unit": "caixa",
                    "min_stock": 10,
                    "price": 42.9,
                    "consumption_unit": "atendimento",
                    "consumption_rate": 0.02,
                },
                {
                    "name": "Máscara Cirúrgica",
                    "unit": "caixa",
                    "min_stock": 5,
                    "price": 18.5,
                    "consumption_unit": "atendimento",
                    "consumption_rate": 0.01,
                },
                {"name": "Gaze Estéril", "unit": "pacote", "min_stock": 20, "price": 7.0},
            ],
        )

        today = date.today()
        gateway.add_multiple(
            ENTRIES,
            [
                {"date": today - timedelta(days=40), "product_id": gloves.id, "supplier": "Cirúrgica Brasil", "quantity": 30},
                {"date": today - timedelta(days=12), "product_id": masks.id, "supplier": "Cirúrgica Brasil", "quantity": 12},
                {"date": today - timedelta(days=3), "product_id": gauze.id, "supplier": "MedSul", "quantity": 50},
            ],
        )
        gateway.add_multiple(
            EXITS,
            [
                {"date": today - timedelta(days=35), "product_id": gloves.id, "quantity": 6},
                {"date": today - timedelta(days=10), "product_id": gloves.id, "quantity": 9},
                {"date": today - timedelta(days=2), "product_id": masks.id, "quantity": 8},
            ],
        )
        print("Seed data created for {}.".format(user_id))


if __name__ == "__main__":
    main()
