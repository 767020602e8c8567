"""
SQLAlchemy Database Models

The sql backend stores the same namespaced keys and JSON values as every
other backend, one row per key.
"""

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func

from cardapio.database import Base


class KeyValueEntry(Base):
    """One persisted key ("@cardapio:produtos:<id>") and its JSON text."""
    __tablename__ = "kv_store"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self):
        return f"<KeyValueEntry {self.key}>"
