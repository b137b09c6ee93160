"""
Base service - shared exceptions and logging for document services.
"""

from docversions.core.logging import get_service_logger


class DocumentNotFoundError(Exception):
    """Document not found error."""

    pass


class VersionNotFoundError(Exception):
    """Version not found under an existing document."""

    pass


class NodeNotFoundError(Exception):
    """Node not found under an existing version."""

    pass


class NicknameNotFoundError(Exception):
    """No nickname recorded for the user."""

    pass


class NicknameAlreadySetError(Exception):
    """Nicknames are write-once."""

    pass


class DocumentValidationError(Exception):
    """Request data failed a service-level check."""

    pass


class BaseService:
    """Base service with the shared logger."""

    def __init__(self, name: str):
        self.logger = get_service_logger(name)
