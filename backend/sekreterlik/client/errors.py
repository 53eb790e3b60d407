from __future__ import annotations
from typing import Optional


class ClientError(Exception):
    """Base error for the client-side access layer."""


class ApiError(ClientError):
    def __init__(self, status_code: Optional[int], message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class PermissionRegistryError(ApiError):
    pass


class SessionParseError(ClientError, ValueError):
    """Persisted user snapshot is unreadable."""
