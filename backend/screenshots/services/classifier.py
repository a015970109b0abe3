"""截图分类服务：调用视觉模型，失败时回退到关键词规则。"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from ..taxonomy import FALLBACK_RULES, OTHER, build_prompt, is_valid_category
from .config import VisionConfig
from .errors import ExternalServiceError

logger = logging.getLogger(__name__)


def fallback_category(image_url: str) -> str:
    """根据 URL 中的关键词给出确定性的分类。"""

    url = image_url.lower()
    for keywords, label in FALLBACK_RULES:
        if any(keyword in url for keyword in keywords):
            return label
    return OTHER


class CategoryClassifier:
    """为单张截图返回一个分类标签，任何情况下都不抛异常。"""

    def __init__(self, config: VisionConfig, session: Optional[requests.Session] = None) -> None:
        self.config = config
        self._session = session
        self._prompt = build_prompt()

    @property
    def endpoint(self) -> str:
        return f"{self.config.api_base.rstrip('/')}/chat/completions"

    def _build_payload(self, image_url: str) -> Dict[str, Any]:
        return {
            "model": self.config.model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": self._prompt},
                        {"type": "image_url", "image_url": {"url": image_url}},
                    ],
                }
            ],
            "max_tokens": self.config.max_tokens,
        }

    def _post(self, payload: Dict[str, Any]) -> requests.Response:
        poster = self._session.post if self._session is not None else requests.post
        return poster(
            self.endpoint,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.config.api_key}",
            },
            json=payload,
            timeout=self.config.timeout,
        )

    def _ask_model(self, image_url: str) -> str:
        resp = self._post(self._build_payload(image_url))
        if resp.status_code >= 300:
            raise ExternalServiceError("openai", resp.text, status_code=resp.status_code)

        result = resp.json()
        choices = result.get("choices") or [{}]
        content = ((choices[0] or {}).get("message") or {}).get("content") or ""
        category = content.strip()
        if category and is_valid_category(category):
            return category
        return OTHER

    def classify(self, image_url: str) -> str:
        if not self.config.enabled:
            logger.warning("未配置 OpenAI API key，使用关键词规则分类")
            return fallback_category(image_url)

        try:
            return self._ask_model(image_url)
        except ExternalServiceError as exc:
            logger.error(
                "视觉模型返回错误: %s",
                exc.detail,
                extra={"status_code": exc.status_code, "image_url": image_url},
            )
        except Exception:
            logger.exception("视觉模型调用失败", extra={"image_url": image_url})
        return fallback_category(image_url)
