# src/app/app.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.app.api.error_handlers import register_error_handlers
from src.app.api.routes import api_router
from src.app.config import RelayConfig, load_relay_config
from src.app.logger.logger_configuration import configure_logging, logger
from src.app.service.extraction_service import GeminiMCQExtractionService
from src.app.service.mcq_interface import IMCQExtractionService


def _install_cors(app: FastAPI, config: RelayConfig) -> None:
    if config.cors_is_open:
        app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
        return

    allowed_origins = set(config.allowed_origins)

    # CORSMiddleware is added after this, so it wraps the check and answers preflights itself.
    @app.middleware("http")
    async def reject_disallowed_origins(request: Request, call_next):
        origin = request.headers.get("origin")
        if origin is not None and origin not in allowed_origins:
            logger.warning(f"[CORS] Rejected request from origin {origin}")
            return JSONResponse(status_code=403, content={"error": "Not allowed by CORS"})
        return await call_next(request)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.allowed_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )


def create_app(config: RelayConfig = None, extraction_service: IMCQExtractionService = None) -> FastAPI:
    if config is None:
        config = load_relay_config()

    configure_logging(config.log_level)

    if extraction_service is None:
        extraction_service = GeminiMCQExtractionService(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"[APP] {config.app_name} v{config.app_version} ready (prompt variant '{config.prompts.variant}')")
        yield
        close = getattr(extraction_service, "close", None)
        if close is not None:
            close()

    app = FastAPI(
        title=config.app_name,
        version=config.app_version,
        description="Extracts multiple-choice questions from an image through the Gemini API.",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.extraction_service = extraction_service

    _install_cors(app, config)
    register_error_handlers(app)
    app.include_router(api_router)

    return app


if __name__ == "__main__":
    relay_config = load_relay_config()
    uvicorn.run(create_app(relay_config), host=relay_config.host, port=relay_config.port)
