# src/app/service/mcq_interface.py

from abc import ABC, abstractmethod
from typing import Any, List

from pydantic import BaseModel


class QuestionOption(BaseModel):
    """Une option de réponse telle que renvoyée par le modèle."""
    text: str
    isCorrect: bool


class ExtractedQuestion(BaseModel):
    """Structure d'un QCM extrait de l'image."""
    questionText: str
    referenceText: str = ""
    solutionText: str = ""
    options: List[QuestionOption]


class IMCQExtractionService(ABC):
    """
    Interface pour les services qui extraient les QCM d'une image.
    """

    @abstractmethod
    def extract_questions(self, image_path: str, mime_type: str) -> Any:
        """
        Analyse une image et renvoie les questions extraites.

        Args:
            image_path: Le chemin vers le fichier image.
            mime_type: Le type MIME déclaré pour l'image.

        Returns:
            La structure JSON décodée de la réponse du modèle.

        Raises:
            RelayError: si la réponse amont est vide ou n'est pas du JSON valide.
        """
        pass
