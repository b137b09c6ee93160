"""
Document Service - users, versions and nodes over the document table.

Every mutation is a read-modify-write of one item:
- read the full item (or start an empty one for implicit creation)
- replace the one nested field of interest in a local copy
- put the whole item back

There is no version token on the item, so two writers racing on the same
document id can overwrite each other's change.
"""

import time
from typing import Any, Dict, List, Optional, Tuple

from docversions.models.schemas import NODE_FIELDS, NodeCreate, VersionCreate
from docversions.services.document_table import ID_ATTRIBUTE, DocumentTable, document_table
from .base_service import (
    BaseService,
    DocumentNotFoundError,
    DocumentValidationError,
    NicknameAlreadySetError,
    NicknameNotFoundError,
    NodeNotFoundError,
    VersionNotFoundError,
)

COMPARED_VERSION_FIELDS = ("title", "description", "username", "userid", "nodes")


class DocumentService(BaseService):
    """Document, nickname, version and node operations."""

    def __init__(self, table: Optional[DocumentTable] = None):
        super().__init__("document")
        self.table = table or document_table

    # ------------------------------------------------------------------
    # Item helpers
    # ------------------------------------------------------------------

    async def _require_item(self, document_id: str) -> Dict[str, Any]:
        item = await self.table.get_item(document_id)
        if item is None:
            raise DocumentNotFoundError("Document not found")
        return item

    async def _item_or_new(self, document_id: str) -> Dict[str, Any]:
        item = await self.table.get_item(document_id)
        if item is None:
            self.logger.info("Creating document implicitly", document_id=document_id)
            return {ID_ATTRIBUTE: document_id}
        return item

    @staticmethod
    def _version_of(item: Dict[str, Any], timestamp: str) -> Dict[str, Any]:
        versions = item.get("versions") or {}
        if timestamp not in versions:
            raise VersionNotFoundError("Version not found")
        return versions[timestamp]

    @staticmethod
    def _node_of(version: Dict[str, Any], node_id: str) -> Dict[str, Any]:
        nodes = version.get("nodes") or {}
        if node_id not in nodes:
            raise NodeNotFoundError("Node not found")
        return nodes[node_id]

    async def _put_version(
        self, item: Dict[str, Any], timestamp: str, version: Dict[str, Any]
    ) -> None:
        versions = dict(item.get("versions") or {})
        versions[timestamp] = version
        await self.table.put_item({**item, "versions": versions})

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    async def create_document(self, body: Any) -> Dict[str, Any]:
        """Create or replace a document item from a raw JSON body."""
        if not isinstance(body, dict):
            raise DocumentValidationError("Request body must be a JSON object")
        document_id = body.get(ID_ATTRIBUTE)
        if not isinstance(document_id, str) or not document_id.strip():
            raise DocumentValidationError(f"{ID_ATTRIBUTE} is required")

        await self.table.put_item(body)
        self.logger.info("Document stored", document_id=document_id)
        return body

    async def get_document(self, document_id: str) -> Dict[str, Any]:
        return await self._require_item(document_id)

    async def list_documents(self) -> List[Dict[str, Any]]:
        return await self.table.scan()

    async def get_document_overview(self, document_id: str) -> Dict[str, Any]:
        """Users and versions of one document."""
        item = await self._require_item(document_id)
        return {
            "users": item.get("users") or {},
            "versions": item.get("versions") or {},
        }

    # ------------------------------------------------------------------
    # Nicknames
    # ------------------------------------------------------------------

    async def get_nickname(self, document_id: str, user_id: str) -> str:
        item = await self.table.get_item(document_id)
        users = (item or {}).get("users") or {}
        if user_id not in users:
            raise NicknameNotFoundError("Nickname not found for this user")
        return users[user_id]

    async def set_nickname(self, document_id: str, user_id: str, nickname: str) -> str:
        """Bind a nickname to a user id; refuses to overwrite an existing one."""
        item = await self._item_or_new(document_id)
        users = dict(item.get("users") or {})
        if user_id in users:
            self.logger.warning(
                "Nickname already set",
                document_id=document_id,
                user_id=user_id,
            )
            raise NicknameAlreadySetError("Nickname already set for this user")

        users[user_id] = nickname
        await self.table.put_item({**item, "users": users})
        self.logger.info("Nickname set", document_id=document_id, user_id=user_id)
        return nickname

    # ------------------------------------------------------------------
    # Versions
    # ------------------------------------------------------------------

    async def list_versions(self, document_id: str) -> Dict[str, Any]:
        item = await self._require_item(document_id)
        return item.get("versions") or {}

    async def get_version(self, document_id: str, timestamp: str) -> Dict[str, Any]:
        item = await self._require_item(document_id)
        return self._version_of(item, timestamp)

    async def add_version(
        self, document_id: str, data: VersionCreate
    ) -> Tuple[str, Dict[str, Any]]:
        """Store a version under the given or a server-chosen timestamp."""
        timestamp = data.timestamp or str(int(time.time()))
        version = {
            "title": data.title,
            "username": data.username,
            "userid": data.userid,
            "description": data.description,
        }
        if data.nodes is not None:
            version["nodes"] = data.nodes

        item = await self._item_or_new(document_id)
        if timestamp in (item.get("versions") or {}):
            self.logger.info(
                "Replacing existing version", document_id=document_id, timestamp=timestamp
            )
        await self._put_version(item, timestamp, version)

        self.logger.info("Version added", document_id=document_id, timestamp=timestamp)
        return timestamp, version

    async def delete_version(self, document_id: str, timestamp: str) -> None:
        """Remove one version key; users and sibling versions are kept."""
        item = await self._require_item(document_id)
        self._version_of(item, timestamp)

        versions = dict(item["versions"])
        del versions[timestamp]
        await self.table.put_item({**item, "versions": versions})
        self.logger.info("Version deleted", document_id=document_id, timestamp=timestamp)

    async def compare_versions(
        self, document_id: str, timestamp1: str, timestamp2: str
    ) -> Dict[str, bool]:
        """Per-field inequality between two versions."""
        item = await self._require_item(document_id)
        first = self._version_of(item, timestamp1)
        second = self._version_of(item, timestamp2)

        differences = {
            field: first.get(field) != second.get(field)
            for field in COMPARED_VERSION_FIELDS
        }
        # A version without nodes and one with an empty node map hold the same nodes
        differences["nodes"] = (first.get("nodes") or {}) != (second.get("nodes") or {})
        return differences

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    async def list_nodes(self, document_id: str, timestamp: str) -> Dict[str, Any]:
        version = await self.get_version(document_id, timestamp)
        return version.get("nodes") or {}

    async def get_node(
        self, document_id: str, timestamp: str, node_id: str
    ) -> Dict[str, Any]:
        version = await self.get_version(document_id, timestamp)
        return self._node_of(version, node_id)

    async def create_node(
        self, document_id: str, timestamp: str, node_id: str, data: NodeCreate
    ) -> Dict[str, Any]:
        """Create (or replace) a node in an existing version."""
        item = await self._require_item(document_id)
        version = dict(self._version_of(item, timestamp))

        node = data.model_dump(exclude_none=True)
        nodes = dict(version.get("nodes") or {})
        nodes[node_id] = node
        version["nodes"] = nodes

        await self._put_version(item, timestamp, version)
        self.logger.info(
            "Node created", document_id=document_id, timestamp=timestamp, node_id=node_id
        )
        return node

    async def update_node(
        self,
        document_id: str,
        timestamp: str,
        node_id: str,
        fields: Dict[str, int],
    ) -> Dict[str, Any]:
        """Overwrite only the given fields of an existing node."""
        unknown = set(fields) - set(NODE_FIELDS)
        if unknown:
            raise DocumentValidationError(
                f"Unknown node field(s): {', '.join(sorted(unknown))}"
            )
        if not fields:
            raise DocumentValidationError("No node fields to update")

        item = await self._require_item(document_id)
        version = dict(self._version_of(item, timestamp))
        node = {**self._node_of(version, node_id), **fields}

        version["nodes"] = {**version["nodes"], node_id: node}
        await self._put_version(item, timestamp, version)

        self.logger.info(
            "Node updated",
            document_id=document_id,
            timestamp=timestamp,
            node_id=node_id,
            fields=sorted(fields),
        )
        return node

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    async def get_user_activity(
        self, document_id: str, timestamp: str, user_id: str
    ) -> Dict[str, Any]:
        """Join one version with a user's nickname."""
        item = await self._require_item(document_id)
        version = self._version_of(item, timestamp)
        nickname = (item.get("users") or {}).get(user_id)

        return {
            "documentId": document_id,
            "timestamp": timestamp,
            "userId": user_id,
            "nickname": nickname,
            "isCreator": str(version.get("userid")) == user_id,
            "version": {
                "title": version.get("title"),
                "description": version.get("description", ""),
                "username": version.get("username"),
            },
            "nodeCount": len(version.get("nodes") or {}),
        }


document_service = DocumentService()
