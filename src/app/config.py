import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

from src.app.config_loader import load_config

BASE_DIR = Path(__file__).resolve().parent

DEFAULT_PORT = 5000
DEFAULT_GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"


@dataclass(frozen=True)
class GeminiConfig:
    api_key: Optional[str]
    api_base: str = DEFAULT_GEMINI_API_BASE
    model: str = DEFAULT_GEMINI_MODEL
    timeout_seconds: Optional[float] = None

    @property
    def endpoint(self) -> str:
        return f"{self.api_base.rstrip('/')}/models/{self.model}:generateContent"


@dataclass(frozen=True)
class PromptConfig:
    directory: Path
    extraction_file: str
    variant: str
    placeholder_rule: str
    extra_rules: Tuple[str, ...] = ()

    @property
    def template_path(self) -> Path:
        return self.directory / self.extraction_file


@dataclass(frozen=True)
class RelayConfig:
    """Process-wide settings, built once before the server binds its port."""
    gemini: GeminiConfig
    prompts: PromptConfig
    app_name: str = "MCQ Extraction Relay"
    app_version: str = "1.0.0"
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    allowed_origins: Tuple[str, ...] = ("*",)
    upload_dir: Optional[Path] = None
    strict_schema: bool = False
    log_level: str = "INFO"
    log_gemini_responses: bool = True
    log_timings: bool = True

    @property
    def cors_is_open(self) -> bool:
        return "*" in self.allowed_origins


def _build_prompt_config(prompts_section: dict) -> PromptConfig:
    variants = prompts_section.get("variants", {})
    variant = prompts_section.get("variant", "generic")
    if variant not in variants:
        raise ValueError(
            f"Unknown prompt variant '{variant}'. Available variants: {sorted(variants)}"
        )

    selected = variants[variant] or {}
    return PromptConfig(
        directory=BASE_DIR / prompts_section.get("directory", "prompts"),
        extraction_file=prompts_section.get("extraction_file", "mcq_extraction_prompt.txt"),
        variant=variant,
        placeholder_rule=selected.get("placeholder_rule", "").strip(),
        extra_rules=tuple(rule.strip() for rule in selected.get("extra_rules", []) or []),
    )


def load_relay_config(config_path: str = None) -> RelayConfig:
    # Load environment variables from .env file
    load_dotenv()

    _config = load_config(config_path)

    app_section = _config.get("app", {})
    server_section = _config.get("server", {})
    cors_section = _config.get("cors", {})
    upload_section = _config.get("upload", {})
    gemini_section = _config.get("gemini", {})
    extraction_section = _config.get("extraction", {})
    logging_section = _config.get("logging", {})

    upload_dir = upload_section.get("directory")
    timeout = gemini_section.get("timeout_seconds")

    return RelayConfig(
        gemini=GeminiConfig(
            api_key=os.getenv("GEMINI_API_KEY"),
            api_base=gemini_section.get("api_base", DEFAULT_GEMINI_API_BASE),
            model=gemini_section.get("model", DEFAULT_GEMINI_MODEL),
            timeout_seconds=float(timeout) if timeout is not None else None,
        ),
        prompts=_build_prompt_config(_config.get("prompts", {})),
        app_name=app_section.get("name", "MCQ Extraction Relay"),
        app_version=app_section.get("version", "1.0.0"),
        host=server_section.get("host", "0.0.0.0"),
        port=int(server_section.get("port", DEFAULT_PORT)),
        allowed_origins=tuple(cors_section.get("allowed_origins", ["*"]) or ["*"]),
        upload_dir=Path(upload_dir) if upload_dir else None,
        strict_schema=bool(extraction_section.get("strict_schema", False)),
        log_level=str(logging_section.get("level", "INFO")).upper(),
        log_gemini_responses=bool(logging_section.get("log_gemini_responses", True)),
        log_timings=bool(logging_section.get("log_timings", True)),
    )
