"""Figma REST 接口的最小封装。"""

from __future__ import annotations

import requests

from .config import FigmaConfig
from .errors import ExternalServiceError


class FigmaClient:
    def __init__(self, config: FigmaConfig) -> None:
        self.config = config

    def create_file(self, access_token: str, name: str) -> str:
        """新建一个 Figma 文件，返回文件 key。"""

        url = f"{self.config.api_base.rstrip('/')}/files"
        try:
            resp = requests.post(
                url,
                headers={"X-Figma-Token": access_token, "Content-Type": "application/json"},
                json={"name": name},
                timeout=self.config.timeout,
            )
        except requests.RequestException as exc:
            raise ExternalServiceError("figma", f"Failed to reach Figma: {exc}") from exc

        if resp.status_code >= 300:
            raise ExternalServiceError(
                "figma", f"Failed to create Figma file: {resp.text}", status_code=resp.status_code
            )

        key = resp.json().get("key")
        if not key:
            raise ExternalServiceError("figma", "Figma response did not include a file key")
        return key

    def file_url(self, file_key: str) -> str:
        return f"{self.config.web_base.rstrip('/')}/file/{file_key}"
