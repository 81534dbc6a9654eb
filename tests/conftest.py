import io
import json
from typing import Callable, List

import httpx
import pytest
from PIL import Image

from src.app.config import BASE_DIR, GeminiConfig, PromptConfig, RelayConfig
from src.app.service.gemini_client import GeminiClient

GENERIC_PLACEHOLDER_RULE = (
    'If the image contains a math/physics equation or complex diagram before the question, '
    'replace it with "[image]".'
)


def gemini_text_response(text: str) -> dict:
    """Réponse generateContent minimale contenant un seul candidat texte."""
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@pytest.fixture
def prompt_config() -> PromptConfig:
    return PromptConfig(
        directory=BASE_DIR / "prompts",
        extraction_file="mcq_extraction_prompt.txt",
        variant="generic",
        placeholder_rule=GENERIC_PLACEHOLDER_RULE,
    )


@pytest.fixture
def relay_config(tmp_path, prompt_config) -> RelayConfig:
    """
    Configuration isolée : clé factice, dossier d'upload dans tmp_path,
    aucune lecture de config.yaml ni du .env.
    """
    return RelayConfig(
        gemini=GeminiConfig(api_key="test-key", model="gemini-1.5-flash"),
        prompts=prompt_config,
        upload_dir=tmp_path / "uploads",
    )


@pytest.fixture
def png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color="white").save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def recorded_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def gemini_client_factory(relay_config, recorded_requests) -> Callable[..., GeminiClient]:
    """Construit un GeminiClient dont le transport HTTP renvoie la réponse donnée."""

    def _factory(body=None, status_code: int = 200, config: RelayConfig = None) -> GeminiClient:
        def handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            if isinstance(body, (dict, list)):
                return httpx.Response(status_code, content=json.dumps(body).encode(),
                                      headers={"Content-Type": "application/json"})
            return httpx.Response(status_code, text=body or "")

        http_client = httpx.Client(transport=httpx.MockTransport(handler))
        return GeminiClient((config or relay_config).gemini, http_client=http_client)

    return _factory
