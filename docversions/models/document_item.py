"""Key-value row: one stored item per document id.

The whole item (users, versions, nodes) lives in a single JSON column and is
always replaced as a unit; nothing reads or writes a sub-path in SQL.
"""

from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from docversions.core.config import settings
from docversions.models.base import Base


class DocumentItemModel(Base):
    """One document item keyed by its id."""
    __tablename__ = settings.DOCUMENTS_TABLE

    document_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    item: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
