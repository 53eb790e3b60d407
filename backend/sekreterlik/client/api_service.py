"""HTTP facade over the backend endpoints the access layer consumes."""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from sekreterlik.config import settings
from .errors import ApiError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        data = response.json()
    except ValueError:
        return fallback
    if isinstance(data, dict):
        if data.get('message'):
            return str(data['message'])
        err = data.get('error')
        if isinstance(err, dict) and err.get('detail'):
            return str(err['detail'])
    return fallback


class ApiService:
    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        client: Optional[httpx.Client] = None,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.client = client or httpx.Client(
            base_url=base_url or settings.API_BASE_URL,
            transport=transport,
            timeout=timeout,
        )
        self.token: Optional[str] = None

    def close(self) -> None:
        self.client.close()

    def _headers(self) -> Dict[str, str]:
        headers = {'Accept': 'application/json'}
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        return headers

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return self.client.request(method, path, headers=self._headers(), **kwargs)
        except httpx.HTTPError as exc:
            raise ApiError(None, f'{method} {path} failed: {exc}') from exc

    def _json(self, response: httpx.Response, fallback: str) -> Any:
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response, fallback))
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(response.status_code, 'invalid JSON response') from exc

    @staticmethod
    def _position_path(position: str) -> str:
        return f'/permissions/{quote(position, safe="")}'

    # --- auth ---

    def login(self, username: str, password: str) -> Dict[str, Any]:
        """Body of ``POST /auth/login`` whatever the status; callers check ``success``."""
        response = self._request('POST', '/auth/login', json={'username': username, 'password': password})
        try:
            data = response.json()
        except ValueError as exc:
            raise ApiError(response.status_code, 'invalid JSON response') from exc
        if not isinstance(data, dict):
            raise ApiError(response.status_code, 'invalid login response')
        if data.get('success') and data.get('token'):
            self.token = data['token']
        return data

    def logout(self) -> Dict[str, Any]:
        response = self._request('POST', '/auth/logout')
        self.token = None
        return self._json(response, 'Çıkış başarısız')

    def me(self) -> Dict[str, Any]:
        return self._json(self._request('GET', '/auth/me'), 'Kullanıcı bilgileri alınamadı')

    # --- position permissions ---

    def get_all_permissions(self) -> Dict[str, List[str]]:
        return self._json(self._request('GET', '/permissions'), 'Yetkiler alınırken hata')

    def get_permissions_for_position(self, position: str) -> List[str]:
        return self._json(self._request('GET', self._position_path(position)), 'Göreve ait yetkiler alınırken hata')

    def set_permissions_for_position(self, position: str, permissions: List[str]) -> Dict[str, Any]:
        response = self._request('POST', self._position_path(position), json={'permissions': list(permissions)})
        return self._json(response, 'Yetkiler kaydedilemedi')

    def delete_permissions_for_position(self, position: str) -> Dict[str, Any]:
        return self._json(self._request('DELETE', self._position_path(position)), 'Yetkiler silinemedi')

    def get_permission_catalog(self) -> List[Dict[str, str]]:
        return self._json(self._request('GET', '/permission-catalog'), 'Yetki listesi alınamadı')
