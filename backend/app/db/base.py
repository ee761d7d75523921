"""
Declarative base and shared model columns.
"""
import logging
from datetime import datetime
from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator

logger = logging.getLogger(__name__)

Base = declarative_base()


class LenientDateTime(TypeDecorator):
    """
    DateTime column that hands back the raw stored value when the driver
    value cannot be parsed, instead of failing the whole result set.
    """
    impl = DateTime
    cache_ok = True

    def result_processor(self, dialect, coltype):
        process = super().result_processor(dialect, coltype)
        if process is None:
            return None

        def lenient_process(value):
            try:
                return process(value)
            except (TypeError, ValueError):
                logger.warning(f"Unparseable stored datetime {value!r}; returning raw value")
                return value

        return lenient_process


class TimestampMixin:
    """created_at / updated_at columns maintained by SQLAlchemy."""
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class BaseModel(TimestampMixin, Base):
    """Abstract base with an integer primary key and timestamps."""
    __abstract__ = True

    id = Column(Integer, primary_key=True, index=True)
