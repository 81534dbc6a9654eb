# src/app/service/prompt_builder.py

from pathlib import Path
from typing import Sequence

from langchain_core.prompts import PromptTemplate

from src.app.config import PromptConfig
from src.app.logger.logger_configuration import logger

# The base template already lists rules 1-4.
FIRST_EXTRA_RULE_NUMBER = 5


class ExtractionPromptBuilder:
    """
    Renders the instructional text sent alongside the image.

    The template file carries the invariant instructions; the active variant
    from the configuration fills in `placeholder_rule` and `extra_rules`.
    """

    def __init__(self, prompt_config: PromptConfig):
        self.prompt_config = prompt_config
        self.template = PromptTemplate.from_template(self._load_prompt(prompt_config.template_path))
        self.prompt_text = self.render(prompt_config.placeholder_rule, prompt_config.extra_rules)
        logger.info(
            f"[PROMPT] Loaded '{prompt_config.extraction_file}' with variant "
            f"'{prompt_config.variant}' ({len(self.prompt_text)} chars)"
        )

    def _load_prompt(self, file_path: Path) -> str:
        try:
            return file_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise FileNotFoundError(f"Prompt file not found: {file_path}")
        except Exception as e:
            raise IOError(f"Error loading prompt file '{file_path}': {e}")

    def render(self, placeholder_rule: str, extra_rules: Sequence[str] = ()) -> str:
        numbered_rules = "\n".join(
            f"{number}. {rule}" for number, rule in enumerate(extra_rules, start=FIRST_EXTRA_RULE_NUMBER)
        )
        return self.template.format(
            placeholder_rule=placeholder_rule,
            extra_rules=numbered_rules,
        ).strip()
