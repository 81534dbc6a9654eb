# src/app/utils/json_utils.py
import json
import re
from typing import Any

from src.app.service.exceptions import InvalidJsonFromUpstreamError

CODE_FENCE_PATTERN = re.compile(r"```json|```")


def strip_code_fences(response: str) -> str:
    """
    Retire les marqueurs Markdown (```json et ```) et les espaces autour.
    Appliquée à un texte déjà propre, la fonction ne change rien.
    """
    return CODE_FENCE_PATTERN.sub("", response).strip()


def parse_json_strict(text: str) -> Any:
    """Parse le texte nettoyé, sans tentative de réparation."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidJsonFromUpstreamError(str(e)) from e
