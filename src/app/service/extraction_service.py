import base64
import time
from typing import Any, Dict, List

from pydantic import TypeAdapter, ValidationError

from src.app.config import RelayConfig
from src.app.logger.logger_configuration import logger
from src.app.service.exceptions import InvalidQuestionSchemaError, UpstreamEmptyResponseError
from src.app.service.gemini_client import GeminiClient, build_generate_payload
from src.app.service.mcq_interface import ExtractedQuestion, IMCQExtractionService
from src.app.service.prompt_builder import ExtractionPromptBuilder
from src.app.utils.json_utils import parse_json_strict, strip_code_fences

_questions_adapter = TypeAdapter(List[ExtractedQuestion])


class GeminiMCQExtractionService(IMCQExtractionService):
    def __init__(
            self,
            config: RelayConfig,
            gemini_client: GeminiClient = None,
            prompt_builder: ExtractionPromptBuilder = None,
    ):
        self.config = config
        self.gemini_client = gemini_client or GeminiClient(
            config.gemini,
            log_responses=config.log_gemini_responses,
        )
        self.prompt_builder = prompt_builder or ExtractionPromptBuilder(config.prompts)

    def extract_questions(self, image_path: str, mime_type: str) -> Any:
        total_start = time.time()

        with open(image_path, "rb") as image_file:
            image_b64 = base64.b64encode(image_file.read()).decode()

        payload = build_generate_payload(self.prompt_builder.prompt_text, mime_type, image_b64)

        upstream_start = time.time()
        response_data = self.gemini_client.generate_content(payload)
        upstream_time = time.time() - upstream_start

        raw_text = self._first_candidate_text(response_data)
        if self.config.log_gemini_responses:
            logger.info(f"[EXTRACT] Raw text from Gemini ({len(raw_text)} chars): {raw_text}")

        cleaned_text = strip_code_fences(raw_text)
        logger.info(f"[EXTRACT] Cleaned JSON: {cleaned_text}")

        questions = parse_json_strict(cleaned_text)

        if self.config.strict_schema:
            self._validate_questions(questions)

        if self.config.log_timings:
            logger.info(
                f"[EXTRACT] Finished in {time.time() - total_start:.2f}s "
                f"(Gemini {upstream_time:.2f}s)"
            )

        return questions

    def close(self) -> None:
        self.gemini_client.close()

    @staticmethod
    def _first_candidate_text(response_data: Dict) -> str:
        candidates = response_data.get("candidates") if isinstance(response_data, dict) else None
        if not candidates:
            raise UpstreamEmptyResponseError()

        # A structurally absent text part falls through as "" and fails parsing.
        first = candidates[0] if isinstance(candidates[0], dict) else {}
        parts = (first.get("content") or {}).get("parts") or []
        if not parts or not isinstance(parts[0], dict):
            return ""
        return parts[0].get("text") or ""

    @staticmethod
    def _validate_questions(questions: Any) -> None:
        try:
            _questions_adapter.validate_python(questions)
        except ValidationError as e:
            logger.error(f"[VALIDATION] Upstream output does not match the question schema: {e}")
            raise InvalidQuestionSchemaError(str(e)) from e
