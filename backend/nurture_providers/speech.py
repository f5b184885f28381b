from __future__ import annotations

from dataclasses import dataclass
from xml.sax.saxutils import escape

import httpx
from loguru import logger

from nurture_core.config import SpeechSettings
from nurture_core.models import AudioResult, Mode

from .errors import SpeechError, provider_error_message

MIN_SPEECH_CHARS = 5


@dataclass(frozen=True)
class VoiceProfile:
    name: str
    voice_name: str
    style: str
    gender: str = "Female"


VOICE_PROFILES: tuple[VoiceProfile, ...] = (
    VoiceProfile("Aria (Friendly Female)", "en-US-AriaNeural", "cheerful"),
    VoiceProfile("Jenny (Warm Female)", "en-US-JennyNeural", "friendly"),
    VoiceProfile("Sara (Gentle Female)", "en-US-SaraNeural", "gentle"),
)

MODE_VOICE_INDEX = {Mode.GENERAL: 0, Mode.SYMPTOM: 2}


def voice_for_index(index: int) -> VoiceProfile:
    if 0 <= index < len(VOICE_PROFILES):
        return VOICE_PROFILES[index]
    return VOICE_PROFILES[0]


def mime_type_for_format(output_format: str) -> str:
    lowered = output_format.lower()
    if "mp3" in lowered:
        return "audio/mpeg"
    if lowered.startswith("riff") or "pcm" in lowered:
        return "audio/wav"
    if "ogg" in lowered or "opus" in lowered:
        return "audio/ogg"
    if "webm" in lowered:
        return "audio/webm"
    return "application/octet-stream"


def build_ssml(text: str, voice: VoiceProfile) -> str:
    escaped = escape(text, {'"': "&quot;", "'": "&apos;"})
    return (
        '<speak version="1.0" xmlns="http://www.w3.org/2001/10/synthesis" xml:lang="en-US">'
        f'<voice name="{voice.voice_name}"><prosody rate="0.9" pitch="+0Hz">{escaped}</prosody></voice>'
        "</speak>"
    )


class SpeechClient:
    def __init__(self, settings: SpeechSettings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings = settings
        self._transport = transport

    def _timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.settings.timeout_seconds, connect=8.0)

    def prepare_text(self, text: str) -> str:
        cleaned = (text or "").strip()
        if len(cleaned) < MIN_SPEECH_CHARS:
            raise SpeechError("text_too_short", "Text is too short for audio generation.")
        return cleaned[: self.settings.max_chars]

    async def synthesize(self, text: str, voice_index: int = 0) -> AudioResult:
        spoken = self.prepare_text(text)
        voice = voice_for_index(voice_index)
        headers = {
            "Ocp-Apim-Subscription-Key": self.settings.api_key,
            "Content-Type": "application/ssml+xml",
            "X-Microsoft-OutputFormat": self.settings.output_format,
            "User-Agent": "SheNurtures/3.1",
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout(), transport=self._transport) as client:
                response = await client.post(
                    self.settings.synthesis_url,
                    headers=headers,
                    content=build_ssml(spoken, voice).encode("utf-8"),
                )
        except httpx.TimeoutException as exc:
            raise SpeechError("timeout", "Speech provider timed out.") from exc
        except httpx.HTTPError as exc:
            raise SpeechError("transport", f"Failed to reach speech provider: {exc}") from exc

        if response.status_code in {401, 403}:
            raise SpeechError(
                "auth",
                f"Speech provider rejected credentials ({response.status_code}).",
                status_code=response.status_code,
            )
        if response.status_code >= 400:
            raise SpeechError(
                "http_status",
                f"Speech provider error {response.status_code}: {provider_error_message(response)}",
                status_code=response.status_code,
            )
        if not response.content:
            raise SpeechError("empty_audio", "Speech provider returned an empty audio body.")

        logger.debug("speech synthesized voice={} bytes={}", voice.voice_name, len(response.content))
        return AudioResult(
            audio_bytes=response.content,
            mime_type=mime_type_for_format(self.settings.output_format),
            voice_label=voice.name,
        )

    async def check_connection(self) -> bool:
        try:
            async with httpx.AsyncClient(timeout=self._timeout(), transport=self._transport) as client:
                response = await client.get(
                    self.settings.voices_url,
                    headers={"Ocp-Apim-Subscription-Key": self.settings.api_key},
                )
        except httpx.HTTPError as exc:
            logger.warning("speech provider unreachable: {}", exc)
            return False
        if response.status_code == 401:
            logger.warning("speech provider authentication failed; check AZURE_SPEECH_KEY")
            return False
        if response.status_code == 403:
            logger.warning("speech provider access forbidden; check subscription permissions")
            return False
        if response.status_code >= 400:
            logger.warning("speech provider probe failed status={}", response.status_code)
            return False
        return True
