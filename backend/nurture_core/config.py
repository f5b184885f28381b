from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ConfigurationError

REPO_ROOT = Path(__file__).resolve().parents[2]
REQUIRED_ENV_KEYS = ("OPENROUTER_API_KEY", "AZURE_SPEECH_KEY", "AZURE_SPEECH_REGION")

_ENV_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_TRUE_VALUES = {"1", "true", "yes", "on"}


def _load_local_env_file(path: Path) -> None:
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError:
        return
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if not _ENV_KEY_RE.fullmatch(key):
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        os.environ.setdefault(key, value)


def bootstrap_local_env() -> None:
    for candidate in (REPO_ROOT / ".env", REPO_ROOT / "backend/.env"):
        if candidate.exists():
            _load_local_env_file(candidate)


@dataclass(frozen=True)
class CompletionSettings:
    api_key: str
    url: str = "https://openrouter.ai/api/v1/chat/completions"
    model: str = "google/gemma-2-9b-it:free"
    temperature: float = 0.3
    top_p: float = 0.8
    frequency_penalty: float = 0.3
    presence_penalty: float = 0.2
    max_tokens: int = 250
    timeout_seconds: float = 30.0
    referer: str = "http://localhost:3000"
    app_title: str = "She Nurtures AI Assistant"


@dataclass(frozen=True)
class SpeechSettings:
    api_key: str
    region: str
    timeout_seconds: float = 30.0
    max_chars: int = 1000
    output_format: str = "audio-24khz-48kbitrate-mono-mp3"

    @property
    def synthesis_url(self) -> str:
        return f"https://{self.region}.tts.speech.microsoft.com/cognitiveservices/v1"

    @property
    def voices_url(self) -> str:
        return f"https://{self.region}.tts.speech.microsoft.com/cognitiveservices/voices/list"


@dataclass(frozen=True)
class Settings:
    completion: CompletionSettings
    speech: SpeechSettings
    port: int = 3000
    environment: str = "production"
    allowed_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])
    tailored_fallback: bool = False
    public_dir: Path = REPO_ROOT / "public"
    log_level: str = "INFO"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


def _env(name: str, default: str = "") -> str:
    return (os.getenv(name) or default).strip()


def _env_float(name: str, default: float, problems: list[str]) -> float:
    raw = _env(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        problems.append(name)
        return default
    if value <= 0:
        problems.append(name)
        return default
    return value


def _env_int(name: str, default: int, problems: list[str]) -> int:
    raw = _env(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        problems.append(name)
        return default
    if value <= 0:
        problems.append(name)
        return default
    return value


def load_settings() -> Settings:
    missing = [key for key in REQUIRED_ENV_KEYS if not _env(key)]
    if missing:
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}",
            missing=missing,
        )

    malformed: list[str] = []
    port = _env_int("PORT", 3000, malformed)
    completion = CompletionSettings(
        api_key=_env("OPENROUTER_API_KEY"),
        url=_env("SHE_NURTURES_COMPLETION_URL", CompletionSettings.url),
        model=_env("SHE_NURTURES_MODEL", CompletionSettings.model),
        timeout_seconds=_env_float("SHE_NURTURES_COMPLETION_TIMEOUT_SECONDS", 30.0, malformed),
        max_tokens=_env_int("SHE_NURTURES_MAX_TOKENS", CompletionSettings.max_tokens, malformed),
        referer=_env("APP_URL", f"http://localhost:{port}"),
    )
    speech = SpeechSettings(
        api_key=_env("AZURE_SPEECH_KEY"),
        region=_env("AZURE_SPEECH_REGION"),
        timeout_seconds=_env_float("SHE_NURTURES_SPEECH_TIMEOUT_SECONDS", 30.0, malformed),
        max_chars=_env_int("SHE_NURTURES_SPEECH_MAX_CHARS", SpeechSettings.max_chars, malformed),
        output_format=_env("SHE_NURTURES_SPEECH_FORMAT", SpeechSettings.output_format),
    )
    if malformed:
        raise ConfigurationError(
            f"Malformed environment variables: {', '.join(malformed)}",
            missing=malformed,
        )

    origins = [origin.strip() for origin in _env("ALLOWED_ORIGINS", f"http://localhost:{port}").split(",")]
    public_dir = _env("SHE_NURTURES_PUBLIC_DIR")
    return Settings(
        completion=completion,
        speech=speech,
        port=port,
        environment=_env("SHE_NURTURES_ENV", "production").lower(),
        allowed_origins=[origin for origin in origins if origin],
        tailored_fallback=_env("SHE_NURTURES_TAILORED_FALLBACK", "false").lower() in _TRUE_VALUES,
        public_dir=Path(public_dir) if public_dir else REPO_ROOT / "public",
        log_level=_env("SHE_NURTURES_LOG_LEVEL", "INFO").upper(),
    )
