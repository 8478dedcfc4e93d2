import logging
from contextlib import contextmanager

from sqlalchemy import delete, select
from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from inventory_tracker.core.constants import COLLECTIONS, ENTRIES, EXITS, PRODUCTS
from inventory_tracker.core.errors import (
    GatewayConnectionError,
    GatewayError,
    PermissionDeniedError,
    RecordNotFoundError,
)
from inventory_tracker.models.product import Product
from inventory_tracker.models.stock_entry import StockEntry
from inventory_tracker.models.stock_exit import StockExit
from inventory_tracker.models.user_profile import UserProfile

logger = logging.getLogger(__name__)

_COLLECTION_MODELS = {
    PRODUCTS: Product,
    ENTRIES: StockEntry,
    EXITS: StockExit,
}

_COLLECTION_ORDERING = {
    PRODUCTS: (Product.name.asc(),),
    ENTRIES: (StockEntry.date.desc(),),
    EXITS: (StockExit.date.desc(),),
}

_WRITABLE_FIELDS = {
    PRODUCTS: {"name", "unit", "min_stock", "price", "consumption_unit", "consumption_rate"},
    ENTRIES: {"date", "product_id", "supplier", "quantity"},
    EXITS: {"date", "product_id", "quantity"},
}

_PERMISSION_MARKERS = (
    "permission denied",
    "insufficient privilege",
    "readonly database",
    "read-only",
    "access denied",
)

CONNECTION_MESSAGE = (
    "Could not reach the inventory database. Check DATABASE_URL and that the "
    "database server is running."
)
PERMISSION_MESSAGE = (
    "The database refused the operation. Check that the configured database user "
    "is allowed to read and write the inventory tables."
)


def _model_for(collection):
    model = _COLLECTION_MODELS.get(collection)
    if model is None:
        raise ValueError(
            "Unknown collection {!r}; expected one of: {}".format(collection, ", ".join(COLLECTIONS))
        )
    return model


def _record_id(item):
    return getattr(item, "id", item)


class PersistenceGateway:
    """Products, entries and exits of a single user.

    Single writes are independent commits. ``add_multiple`` and
    ``delete_product_cascade`` run in one transaction and either fully apply
    or leave storage untouched.
    """

    def __init__(self, db: Session, user_id: str):
        if not user_id:
            raise ValueError("A user id is required for database operations.")
        self.db = db
        self.user_id = str(user_id)

    # ------------------------------------------------------------------
    # Error translation
    # ------------------------------------------------------------------
    def _translate_error(self, exc: SQLAlchemyError, action: str) -> GatewayError:
        self.db.rollback()
        logger.exception("Failed to %s", action, extra={"user_id": self.user_id})
        message = str(getattr(exc, "orig", None) or exc).lower()
        if any(marker in message for marker in _PERMISSION_MARKERS):
            return PermissionDeniedError(PERMISSION_MESSAGE)
        if isinstance(exc, (OperationalError, InterfaceError, DisconnectionError)):
            return GatewayConnectionError(CONNECTION_MESSAGE)
        return GatewayError("Could not {}. Please try again.".format(action))

    @contextmanager
    def _storage(self, action: str):
        try:
            yield
        except SQLAlchemyError as exc:
            raise self._translate_error(exc, action) from exc

    def _check_fields(self, collection, fields):
        unknown = set(fields) - _WRITABLE_FIELDS[collection]
        if unknown:
            raise ValueError(
                "Unknown field(s) for {}: {}".format(collection, ", ".join(sorted(unknown)))
            )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_all(self, collection):
        model = _model_for(collection)
        stmt = (
            select(model)
            .where(model.user_id == self.user_id)
            .order_by(*_COLLECTION_ORDERING[collection])
        )
        with self._storage("load {}".format(collection)):
            return list(self.db.execute(stmt).scalars().all())

    def get(self, collection, record_id):
        model = _model_for(collection)
        stmt = select(model).where(model.user_id == self.user_id, model.id == record_id)
        with self._storage("load {} record".format(collection)):
            record = self.db.execute(stmt).scalars().first()
        if record is None:
            raise RecordNotFoundError(collection, record_id)
        return record

    def get_dependents(self, product_id):
        """Entries and exits referencing ``product_id``."""
        with self._storage("load product movements"):
            entries = self.db.execute(
                select(StockEntry).where(
                    StockEntry.user_id == self.user_id,
                    StockEntry.product_id == product_id,
                )
            ).scalars().all()
            exits = self.db.execute(
                select(StockExit).where(
                    StockExit.user_id == self.user_id,
                    StockExit.product_id == product_id,
                )
            ).scalars().all()
        return list(entries), list(exits)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def add(self, collection, fields):
        model = _model_for(collection)
        self._check_fields(collection, fields)
        record = model(**fields, user_id=self.user_id)
        with self._storage("add {} record".format(collection)):
            self.db.add(record)
            self.db.commit()
        logger.info("Added %s record %s", collection, record.id, extra={"user_id": self.user_id})
        return record

    def add_multiple(self, collection, items):
        model = _model_for(collection)
        records = []
        for fields in items:
            self._check_fields(collection, fields)
            records.append(model(**fields, user_id=self.user_id))
        if not records:
            return []
        with self._storage("add {} records".format(collection)):
            self.db.add_all(records)
            self.db.commit()
        logger.info(
            "Added %d %s records in one batch",
            len(records),
            collection,
            extra={"user_id": self.user_id},
        )
        return records

    def update(self, collection, record_id, fields):
        self._check_fields(collection, fields)
        record = self.get(collection, record_id)
        for name, value in fields.items():
            setattr(record, name, value)
        with self._storage("update {} record".format(collection)):
            self.db.commit()
        return record

    def delete(self, collection, record_id):
        record = self.get(collection, record_id)
        with self._storage("delete {} record".format(collection)):
            self.db.delete(record)
            self.db.commit()
        logger.info("Deleted %s record %s", collection, record_id, extra={"user_id": self.user_id})

    def delete_product_cascade(self, product_id, entries=None, exits=None):
        """Delete a product with every entry and exit that references it.

        Dependents are collected before anything is deleted. Records passed by
        the caller are removed together with the stored ones, in the same
        transaction as the product, but only when they reference
        ``product_id``.
        """
        self.get(PRODUCTS, product_id)
        stored_entries, stored_exits = self.get_dependents(product_id)
        entry_ids = {_record_id(item) for item in stored_entries}
        exit_ids = {_record_id(item) for item in stored_exits}
        entry_ids.update(_record_id(item) for item in entries or ())
        exit_ids.update(_record_id(item) for item in exits or ())

        entries_deleted = exits_deleted = 0
        with self._storage("delete product and its movements"):
            if entry_ids:
                entries_deleted = self.db.execute(
                    delete(StockEntry).where(
                        StockEntry.user_id == self.user_id,
                        StockEntry.product_id == product_id,
                        StockEntry.id.in_(entry_ids),
                    )
                ).rowcount
            if exit_ids:
                exits_deleted = self.db.execute(
                    delete(StockExit).where(
                        StockExit.user_id == self.user_id,
                        StockExit.product_id == product_id,
                        StockExit.id.in_(exit_ids),
                    )
                ).rowcount
            self.db.execute(
                delete(Product).where(
                    Product.user_id == self.user_id,
                    Product.id == product_id,
                )
            )
            self.db.commit()
        self.db.expire_all()

        logger.info(
            "Deleted product %s with %d entries and %d exits",
            product_id,
            entries_deleted,
            exits_deleted,
            extra={"user_id": self.user_id},
        )
        return {
            "product_id": product_id,
            "entries_deleted": entries_deleted,
            "exits_deleted": exits_deleted,
        }

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------
    def get_user_profile(self, email=""):
        with self._storage("load user profile"):
            profile = self.db.get(UserProfile, self.user_id)
            if profile is None:
                profile = UserProfile(
                    id=self.user_id,
                    email=email or "",
                    is_admin=False,
                    monthly_forecast=0,
                )
                self.db.add(profile)
                self.db.commit()
                logger.info("Created profile", extra={"user_id": self.user_id})
        return profile

    def set_monthly_forecast(self, monthly_forecast):
        if monthly_forecast < 0:
            raise ValueError("monthly forecast must be a non-negative number.")
        profile = self.get_user_profile()
        profile.monthly_forecast = monthly_forecast
        with self._storage("save monthly forecast"):
            self.db.commit()
        return profile


__all__ = ["CONNECTION_MESSAGE", "PERMISSION_MESSAGE", "PersistenceGateway"]
