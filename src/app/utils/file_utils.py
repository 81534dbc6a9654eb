# src/app/utils/file_utils.py
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from src.app.logger.logger_configuration import logger

GENERIC_MIME_TYPES = {"", "application/octet-stream"}
DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"


def save_temp_file(file: UploadFile, directory: Optional[Path] = None) -> str:
    """
    Sauvegarde un fichier UploadFile dans un dossier temporaire
    et retourne son chemin d'accès.
    """
    try:
        if directory is not None:
            directory.mkdir(parents=True, exist_ok=True)
        # Crée un fichier temporaire en conservant l'extension
        suffix = Path(file.filename or "").suffix
        with tempfile.NamedTemporaryFile(delete=False, suffix=suffix, dir=directory) as temp_file:
            temp_file.write(file.file.read())
            return temp_file.name
    except Exception as e:
        raise IOError(f"Unable to save the temporary file: {e}")


@contextmanager
def temp_upload(file: UploadFile, directory: Optional[Path] = None) -> Iterator[str]:
    """
    Écrit l'upload sur disque le temps du bloc `with`, puis le supprime,
    que le traitement réussisse ou échoue.
    """
    temp_path = save_temp_file(file, directory)
    logger.info(f"[UPLOAD] Image uploaded: {temp_path}")
    try:
        yield temp_path
    finally:
        if os.path.exists(temp_path):
            os.remove(temp_path)
            logger.debug(f"[UPLOAD] Removed {temp_path}")


def resolve_mime_type(image_path: str, declared_mime_type: Optional[str]) -> str:
    """
    Garde le type MIME déclaré par le client ; s'il est absent ou générique,
    le devine avec Pillow.
    """
    declared = (declared_mime_type or "").strip().lower()
    try:
        with Image.open(image_path) as image:
            logger.info(f"[UPLOAD] Image loaded: {image.size} pixels, format {image.format}")
            detected = Image.MIME.get(image.format) if image.format else None
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"[UPLOAD] Pillow could not identify the image: {e}")
        detected = None

    if declared not in GENERIC_MIME_TYPES:
        return declared
    return detected or DEFAULT_IMAGE_MIME_TYPE
