from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from string_analyzer.database import Base


class KeyValueEntry(Base):
    __tablename__ = "kv_entries"

    key = Column(String(64), primary_key=True, index=True)  # SHA-256 hash
    value = Column(Text, nullable=False)  # JSON-encoded StringRecord
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
