"""
Gemini engine - single generateContent call over the REST API
"""

import asyncio
import logging
import math
import re
import time
from typing import Dict, Any, Optional

import requests

from .errors import UpstreamError, RateLimitedError, EmptyResponseError

logger = logging.getLogger(__name__)

RATE_LIMIT_STATUSES = (429, 503)
_RATE_LIMIT_HINT = re.compile(r"RESOURCE_EXHAUSTED|rate.?limit", re.IGNORECASE)
_DELAY_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)s\s*$")


class GeminiEngine:
    """Google Gemini engine using the generateContent REST endpoint"""

    def __init__(self, api_key: str, model: str = "gemini-2.0-flash",
                 base_url: str = "https://generativelanguage.googleapis.com/v1beta",
                 temperature: float = 0.2, max_output_tokens: int = 800,
                 response_mime_type: str = "application/json",
                 timeout: float = 60.0, default_retry_after: int = 5):
        self.name = "gemini"
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.response_mime_type = response_mime_type
        self.timeout = timeout
        self.default_retry_after = default_retry_after
        self.total_requests = 0
        self.error_count = 0
        self.last_request_time = 0.0

    @classmethod
    def from_settings(cls, settings) -> "GeminiEngine":
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            temperature=settings.temperature,
            max_output_tokens=settings.max_output_tokens,
            response_mime_type=settings.response_mime_type,
            timeout=settings.upstream_timeout,
            default_retry_after=settings.default_retry_after,
        )

    @property
    def url(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def build_payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_output_tokens,
                "responseMimeType": self.response_mime_type,
            },
        }

    async def generate(self, prompt: str) -> str:
        """Send the prompt and return the generated text"""
        payload = self.build_payload(prompt)

        self.total_requests += 1
        self.last_request_time = time.time()

        # requests is blocking; keep it off the event loop
        loop = asyncio.get_running_loop()
        try:
            response = await loop.run_in_executor(
                None,
                lambda: requests.post(
                    self.url,
                    params={"key": self.api_key},
                    headers={"Content-Type": "application/json"},
                    json=payload,
                    timeout=self.timeout,
                ),
            )
        except requests.RequestException as e:
            self.error_count += 1
            logger.error(f"Gemini request failed: {e}")
            raise UpstreamError("LLM error", details=str(e)) from e

        if not response.ok:
            self.error_count += 1
            self._raise_for_status(response)

        text = self.extract_text(response)
        if not text:
            self.error_count += 1
            logger.error(f"Gemini returned {response.status_code} without candidate text")
            raise EmptyResponseError("No assistant content", upstream_status=response.status_code)
        return text

    def _raise_for_status(self, response: requests.Response):
        body = response.text
        status = response.status_code
        if status in RATE_LIMIT_STATUSES or _RATE_LIMIT_HINT.search(body or ""):
            retry_after = self.parse_retry_after(response)
            logger.warning(f"Gemini rate limited ({status}); suggesting retry after {retry_after}s")
            raise RateLimitedError(
                "Rate limited by LLM provider",
                retry_after=retry_after,
                details=body,
                upstream_status=status,
            )

        logger.error(f"Gemini API error: {status} - {body[:200]}")
        raise UpstreamError("LLM error", details=body, upstream_status=status)

    def parse_retry_after(self, response: requests.Response) -> int:
        """Seconds to wait: Retry-After header, then RetryInfo in the body, then the default"""
        header = response.headers.get("Retry-After")
        if header and header.strip().isdigit():
            return max(int(header.strip()), 1)

        try:
            details = response.json().get("error", {}).get("details", [])
        except (ValueError, AttributeError):
            details = []
        for detail in details if isinstance(details, list) else []:
            if not isinstance(detail, dict):
                continue
            if not str(detail.get("@type", "")).endswith("google.rpc.RetryInfo"):
                continue
            match = _DELAY_RE.match(str(detail.get("retryDelay", "")))
            if match:
                return max(math.ceil(float(match.group(1))), 1)

        return self.default_retry_after

    @staticmethod
    def extract_text(response: requests.Response) -> Optional[str]:
        """Pull candidates[0].content.parts[0].text out of a generateContent reply"""
        try:
            data = response.json()
        except ValueError:
            return None
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return None
        return text if isinstance(text, str) and text else None

    def get_stats(self) -> Dict[str, Any]:
        """Get engine statistics"""
        return {
            "name": self.name,
            "model": self.model,
            "total_requests": self.total_requests,
            "error_count": self.error_count,
            "last_request_time": self.last_request_time,
        }
