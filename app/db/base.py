from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models. Datetimes are stored timezone-aware."""
    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }
