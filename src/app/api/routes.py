import asyncio
from typing import Optional

from fastapi import APIRouter, File, Request, UploadFile

from src.app.logger.logger_configuration import logger
from src.app.service.exceptions import MissingFileError, RelayError, UnhandledProcessingError
from src.app.utils.file_utils import resolve_mime_type, temp_upload

api_router = APIRouter()


def _extract_from_upload(extraction_service, image_path: str, declared_mime_type: Optional[str]):
    # Runs in a worker thread: Pillow and the Gemini call both block.
    mime_type = resolve_mime_type(image_path, declared_mime_type)
    return extraction_service.extract_questions(image_path=image_path, mime_type=mime_type)


@api_router.post("/generate", summary="Extract the MCQs shown in an uploaded image")
async def generate(request: Request, image: Optional[UploadFile] = File(None)):
    """
    Upload one image in the `image` form field. The image is sent to Gemini
    and the extracted questions are returned as
    `{"success": true, "questions": [...]}`.
    """
    if image is None or not image.filename:
        raise MissingFileError()

    config = request.app.state.config
    extraction_service = request.app.state.extraction_service

    try:
        with temp_upload(image, config.upload_dir) as temp_path:
            questions = await asyncio.to_thread(
                _extract_from_upload,
                extraction_service,
                temp_path,
                image.content_type,
            )
        return {"success": True, "questions": questions}

    except RelayError:
        raise
    except Exception as e:
        logger.exception(f"[GENERATE] Error processing image: {e}")
        raise UnhandledProcessingError(str(e)) from e


@api_router.get("/health", summary="Liveness probe")
async def health():
    return {"status": "ok"}
