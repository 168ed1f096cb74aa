import datetime as dt
from sqlalchemy.orm import DeclarativeBase, declared_attr


def utcnow() -> dt.datetime:
    """Naive UTC timestamp; every DateTime column stores naive UTC."""
    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    @declared_attr.directive
    def __tablename__(cls) -> str:
        return cls.__name__.lower()
