"""Document sources: Figma REST API client and local JSON files."""
from __future__ import annotations
import json
import logging
import pathlib
from typing import Any, Dict

import requests

from .errors import FigmaAPIError

logger = logging.getLogger(__name__)

FIGMA_API_BASE = "https://api.figma.com/v1"


class FigmaClient:
    """Thin wrapper over the Figma file endpoints. No retries."""

    def __init__(self, token: str, base_url: str = FIGMA_API_BASE, timeout: float = 30,
                 session: requests.Session | None = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"X-Figma-Token": token})

    def _request(self, path: str, params: Dict[str, Any] | None = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise FigmaAPIError(f"Figma API request to {path} failed: {e}") from e
        if not resp.ok:
            raise FigmaAPIError(f"Figma API error {resp.status_code}: {resp.text}",
                                status_code=resp.status_code)
        return resp.json()

    def get_file(self, file_key: str) -> Dict[str, Any]:
        logger.info(f"Fetching Figma file {file_key}")
        return self._request(f"/files/{file_key}")

    def get_file_versions(self, file_key: str) -> Dict[str, Any]:
        return self._request(f"/files/{file_key}/versions")

    def get_file_metadata(self, file_key: str) -> Dict[str, Any]:
        """Lightweight call: name, lastModified and version without the full tree."""
        data = self._request(f"/files/{file_key}", params={'depth': 1})
        return {
            'name': data.get('name'),
            'lastModified': data.get('lastModified'),
            'version': data.get('version'),
        }


def load_document(path: pathlib.Path) -> Dict[str, Any]:
    """Read a raw or canonical document from a JSON file."""
    with pathlib.Path(path).open('r', encoding='utf-8') as f:
        return json.load(f)
