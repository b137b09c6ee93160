"""
Document table - key-value access to stored document items.

The table exposes whole-item operations only: get one item, replace one
item, scan every item. Callers mutate a local copy and put it back.
"""

import copy
from typing import Any, Dict, List, Optional

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError

from docversions.core.db_client import db
from docversions.core.exceptions import DatabaseError
from docversions.core.logging import get_db_logger
from docversions.models.document_item import DocumentItemModel

ID_ATTRIBUTE = "documentId"


class DocumentTable:
    """Whole-item reads and writes against the documents table."""

    def __init__(self, database=None):
        self._db = database or db
        self.logger = get_db_logger()

    async def get_item(self, document_id: str) -> Optional[Dict[str, Any]]:
        """Return a private copy of the stored item, or None."""
        try:
            async with self._db.session() as session:
                row = await session.get(DocumentItemModel, document_id)
                if row is None:
                    return None
                return copy.deepcopy(row.item)
        except SQLAlchemyError as e:
            self.logger.error("get_item failed", document_id=document_id, error=str(e))
            raise DatabaseError(str(e), {"document_id": document_id})

    async def put_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """Replace the whole item keyed by its documentId."""
        document_id = item.get(ID_ATTRIBUTE)
        if not isinstance(document_id, str) or not document_id:
            raise ValueError(f"item is missing a string {ID_ATTRIBUTE}")

        try:
            async with self._db.session() as session:
                await session.merge(
                    DocumentItemModel(document_id=document_id, item=copy.deepcopy(item))
                )
            self.logger.debug("put_item", document_id=document_id)
            return item
        except SQLAlchemyError as e:
            self.logger.error("put_item failed", document_id=document_id, error=str(e))
            raise DatabaseError(str(e), {"document_id": document_id})

    async def scan(self) -> List[Dict[str, Any]]:
        """Return every stored item, ordered by id."""
        try:
            async with self._db.session() as session:
                result = await session.execute(
                    select(DocumentItemModel).order_by(DocumentItemModel.document_id)
                )
                return [copy.deepcopy(row.item) for row in result.scalars().all()]
        except SQLAlchemyError as e:
            self.logger.error("scan failed", error=str(e))
            raise DatabaseError(str(e))

    async def ping(self) -> bool:
        try:
            async with self._db.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            self.logger.warning("Key-value store ping failed", error=str(e))
            return False


document_table = DocumentTable()
