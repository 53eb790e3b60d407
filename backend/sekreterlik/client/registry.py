"""Client for the position → permission mapping held by the backend.

Reads fail closed: any error yields an empty result, so a user never gains a
permission because the registry was unreachable. Writes raise. Nothing is
cached; every consumer fetches on its own.
"""
from __future__ import annotations
import logging
from typing import Dict, List, Optional

from sekreterlik.constants.permissions import AVAILABLE_PERMISSIONS
from .api_service import ApiService
from .errors import ApiError, PermissionRegistryError

logger = logging.getLogger(__name__)

SAVE_FAILED = 'Yetkiler kaydedilemedi'


class PermissionRegistryClient:
    def __init__(self, api: ApiService):
        self.api = api

    def get_all_permissions(self) -> Dict[str, List[str]]:
        try:
            data = self.api.get_all_permissions()
        except ApiError as exc:
            logger.warning('Could not fetch permission map: %s', exc)
            return {}
        if not isinstance(data, dict):
            logger.warning('Unexpected permission map payload: %r', type(data).__name__)
            return {}
        return {str(pos): [str(k) for k in keys] for pos, keys in data.items() if isinstance(keys, list)}

    def get_permissions_for_position(self, position: Optional[str]) -> List[str]:
        if not position:
            return []
        try:
            data = self.api.get_permissions_for_position(position)
        except ApiError as exc:
            logger.warning('Could not fetch permissions for %r: %s', position, exc)
            return []
        if not isinstance(data, list):
            return []
        return [str(k) for k in data]

    def set_permissions_for_position(self, position: str, permissions: List[str]) -> List[str]:
        """Replace the whole set for ``position``; returns the stored keys."""
        try:
            data = self.api.set_permissions_for_position(position, permissions)
        except ApiError as exc:
            raise PermissionRegistryError(exc.status_code, exc.message or SAVE_FAILED) from exc
        return list(data.get('permissions', permissions)) if isinstance(data, dict) else list(permissions)

    def clear_permissions_for_position(self, position: str) -> None:
        try:
            self.api.delete_permissions_for_position(position)
        except ApiError as exc:
            raise PermissionRegistryError(exc.status_code, exc.message or SAVE_FAILED) from exc

    def get_catalog(self) -> List[Dict[str, str]]:
        try:
            data = self.api.get_permission_catalog()
        except ApiError as exc:
            logger.warning('Could not fetch permission catalog, using built-in list: %s', exc)
            return list(AVAILABLE_PERMISSIONS)
        return data if isinstance(data, list) else list(AVAILABLE_PERMISSIONS)
