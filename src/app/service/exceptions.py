# src/app/service/exceptions.py

from typing import Optional


class RelayError(Exception):
    """Base error of the extraction pipeline, rendered as `{error, details?}`."""

    status_code = 500
    message = "Failed to process image"

    def __init__(self, details: Optional[str] = None):
        super().__init__(details or self.message)
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class MissingFileError(RelayError):
    status_code = 400
    message = "No file uploaded"


class UpstreamEmptyResponseError(RelayError):
    message = "No candidates found in response"


class InvalidJsonFromUpstreamError(RelayError):
    message = "Invalid JSON format from Gemini API"


class InvalidQuestionSchemaError(InvalidJsonFromUpstreamError):
    message = "Invalid question format from Gemini API"


class UnhandledProcessingError(RelayError):
    """Catch-all for network, filesystem and unexpected failures."""


class UpstreamRequestError(UnhandledProcessingError):
    """The Gemini API could not be reached or answered with a non-2xx status."""
