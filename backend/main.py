from __future__ import annotations

import asyncio
import base64
import sys
import time
from datetime import datetime, timezone
from typing import Any

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger
from pydantic import BaseModel

from nurture_core import (
    ConfigurationError,
    FallbackProvider,
    Mode,
    PipelineOutcome,
    PromptBuilder,
    ResponsePipeline,
    ResponseValidator,
    Settings,
    SymptomCatalog,
    bootstrap_local_env,
    load_settings,
)
from nurture_providers import MODE_VOICE_INDEX, VOICE_PROFILES, CompletionClient, SpeechClient

APP_VERSION = "3.1.0"
API_ENDPOINTS = [
    "GET /api/health",
    "GET /api/symptoms",
    "GET /api/voices",
    "POST /api/chat",
    "POST /api/symptom-check",
]

bootstrap_local_env()

try:
    settings = load_settings()
except ConfigurationError as exc:
    logger.error("startup aborted: {}", exc)
    sys.exit(1)

logger.remove()
logger.add(sys.stderr, level=settings.log_level)


class ChatRequest(BaseModel):
    text: Any = None


class SymptomCheckRequest(BaseModel):
    symptoms: Any = None


class SheNurturesApp:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.catalog = SymptomCatalog()
        self.validator = ResponseValidator()
        self.fallback = FallbackProvider(self.validator, self.catalog, tailored=settings.tailored_fallback)
        self.fallback.verify()
        self.prompts = PromptBuilder(self.catalog)
        self.completion = CompletionClient(settings.completion)
        self.speech = SpeechClient(settings.speech)
        self.pipeline = ResponsePipeline(
            prompts=self.prompts,
            completion=self.completion,
            speech=self.speech,
            validator=self.validator,
            fallback=self.fallback,
            voice_indexes=MODE_VOICE_INDEX,
        )


container = SheNurturesApp(settings)
app = FastAPI(title="She Nurtures Backend", version=APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.monotonic()
    response = await call_next(request)
    logger.info(
        "{} {} -> {} ({}ms)",
        request.method,
        request.url.path,
        response.status_code,
        int((time.monotonic() - started) * 1000),
    )
    return response


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _error_response(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message, **extra})


def _server_error(message: str, exc: Exception) -> JSONResponse:
    details = {"details": str(exc)} if settings.is_development else {}
    return _error_response(500, message, **details)


@app.exception_handler(RequestValidationError)
async def invalid_request_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("rejected malformed body on {}: {}", request.url.path, exc.errors())
    return _error_response(400, "Invalid request body. Please send a JSON object.")


def _answer_data(outcome: PipelineOutcome, started: float) -> dict[str, Any]:
    audio = outcome.audio
    return {
        "text": outcome.text,
        "audioData": base64.b64encode(audio.audio_bytes).decode("ascii") if audio else None,
        "isFallback": outcome.text_only,
        "textSource": outcome.text_source,
        "service": "azure-tts" if audio else "fallback",
        "voiceName": audio.voice_label if audio else None,
        "mimeType": audio.mime_type if audio else None,
        "mode": outcome.mode.value,
        "processingTime": int((time.monotonic() - started) * 1000),
    }


@app.get("/health")
def liveness():
    return {"status": "ok", "timestamp": _utc_timestamp(), "port": settings.port}


@app.post("/api/chat")
async def chat(payload: ChatRequest):
    started = time.monotonic()
    if not isinstance(payload.text, str) or not payload.text.strip():
        return _error_response(400, "Invalid input. Please provide a non-empty text message.")

    try:
        outcome = await container.pipeline.run(Mode.GENERAL, payload.text)
    except Exception as exc:
        logger.exception("general chat request failed")
        return _server_error("An error occurred while processing your request. Please try again.", exc)
    return {"success": True, "data": _answer_data(outcome, started)}


@app.post("/api/symptom-check")
async def symptom_check(payload: SymptomCheckRequest):
    started = time.monotonic()
    if not isinstance(payload.symptoms, list) or not payload.symptoms:
        return _error_response(400, "Invalid input. Please provide an array of symptoms.")
    valid_symptoms = container.catalog.filter_valid(payload.symptoms)
    if not valid_symptoms:
        return _error_response(400, "No valid symptoms provided.")
    logger.info(
        "symptom check submitted={} valid={} codes={}",
        len(payload.symptoms),
        len(valid_symptoms),
        valid_symptoms,
    )

    try:
        outcome = await container.pipeline.run(Mode.SYMPTOM, valid_symptoms)
    except Exception as exc:
        logger.exception("symptom check request failed")
        return _server_error("An error occurred while analyzing your symptoms. Please try again.", exc)
    data = _answer_data(outcome, started)
    data["analyzedSymptoms"] = valid_symptoms
    return {"success": True, "data": data}


@app.get("/api/symptoms")
def list_symptoms():
    return {
        "success": True,
        "data": {
            "categories": container.catalog.grouped(),
            "totalSymptoms": len(container.catalog),
        },
    }


@app.get("/api/voices")
def list_voices():
    return {
        "success": True,
        "data": {
            "voices": [
                {"name": voice.name, "voiceName": voice.voice_name, "style": voice.style, "gender": voice.gender}
                for voice in VOICE_PROFILES
            ],
            "modes": {mode.value: VOICE_PROFILES[index].name for mode, index in MODE_VOICE_INDEX.items()},
        },
    }


@app.get("/api/health")
async def health():
    completion_configured = bool(settings.completion.api_key)
    speech_configured = bool(settings.speech.api_key and settings.speech.region)
    speech_reachable = await container.speech.check_connection() if speech_configured else False
    return {
        "status": "healthy" if completion_configured and speech_reachable else "partial",
        "timestamp": _utc_timestamp(),
        "services": {
            "completion": completion_configured,
            "speech": speech_configured,
            "speechConnection": speech_reachable,
        },
        "features": {
            "generalChat": True,
            "symptomChecker": True,
            "audioTTS": speech_reachable,
        },
        "region": settings.speech.region,
        "version": APP_VERSION,
    }


@app.api_route("/api/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
def api_not_found(request: Request, path: str):
    return _error_response(
        404,
        "API endpoint not found",
        requestedPath=request.url.path,
        availableEndpoints=API_ENDPOINTS,
    )


if settings.public_dir.is_dir():
    app.mount("/", StaticFiles(directory=settings.public_dir, html=True), name="public")
else:
    logger.warning("public directory not found, static files disabled: {}", settings.public_dir)


if __name__ == "__main__":
    logger.info(
        "She Nurtures starting port={} env={} region={}",
        settings.port,
        settings.environment,
        settings.speech.region,
    )
    if asyncio.run(container.speech.check_connection()):
        logger.info("speech provider ready")
    else:
        logger.warning("speech provider connection issue; responses will be text-only until it recovers")
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
