from uuid import uuid4

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def new_record_id() -> str:
    return uuid4().hex


__all__ = ["Base", "new_record_id"]
