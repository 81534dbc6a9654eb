# src/app/service/gemini_client.py

"""
Thin HTTP client for the Gemini `generateContent` REST endpoint.

One request per call, no retry. The API key travels as the `key` query
parameter, so error messages built here never include the request URL.
"""

import json
from typing import Any, Dict, Optional

import httpx

from src.app.config import GeminiConfig
from src.app.logger.logger_configuration import logger
from src.app.service.exceptions import UpstreamRequestError


def build_generate_payload(prompt_text: str, mime_type: str, image_b64: str) -> Dict[str, Any]:
    return {
        "contents": [
            {
                "parts": [
                    {"text": prompt_text},
                    {
                        "inlineData": {
                            "mimeType": mime_type,
                            "data": image_b64,
                        }
                    },
                ]
            }
        ]
    }


class GeminiClient:
    def __init__(
            self,
            gemini_config: GeminiConfig,
            http_client: Optional[httpx.Client] = None,
            log_responses: bool = True,
    ):
        if not gemini_config.api_key:
            raise ValueError("GEMINI_API_KEY is missing")

        self.gemini_config = gemini_config
        self.log_responses = log_responses

        self._owns_client = http_client is None
        if http_client is not None:
            self._client = http_client
        elif gemini_config.timeout_seconds is not None:
            self._client = httpx.Client(timeout=gemini_config.timeout_seconds)
        else:
            self._client = httpx.Client()

    def generate_content(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        logger.info(f"[GEMINI] Sending request to Gemini API ({self.gemini_config.model})...")
        try:
            response = self._client.post(
                self.gemini_config.endpoint,
                params={"key": self.gemini_config.api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error(f"[GEMINI] API error {status_code}: {e.response.text}")
            raise UpstreamRequestError(f"Request failed with status code {status_code}") from e
        except httpx.RequestError as e:
            logger.error(f"[GEMINI] Network error: {type(e).__name__}: {e}")
            raise UpstreamRequestError(f"{type(e).__name__}: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamRequestError(f"Gemini API returned a non-JSON body: {e}") from e

        if self.log_responses:
            logger.info(f"[GEMINI] Full response:\n{json.dumps(data, indent=2, ensure_ascii=False)}")

        return data

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
