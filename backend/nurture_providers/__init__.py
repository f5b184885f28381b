from .completion import CompletionClient, extract_completion_text
from .errors import CompletionError, ProviderError, SpeechError
from .speech import MODE_VOICE_INDEX, VOICE_PROFILES, SpeechClient, VoiceProfile, voice_for_index

__all__ = [
    "MODE_VOICE_INDEX",
    "VOICE_PROFILES",
    "CompletionClient",
    "CompletionError",
    "ProviderError",
    "SpeechClient",
    "SpeechError",
    "VoiceProfile",
    "extract_completion_text",
    "voice_for_index",
]
