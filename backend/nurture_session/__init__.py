from .api_client import AnswerPayload, ApiRequestError, SheNurturesClient, decode_audio
from .state import (
    MAX_HISTORY_ENTRIES,
    MAX_RETRIES,
    ConversationEntry,
    ConversationHistory,
    RetryPolicy,
    SessionState,
)

__all__ = [
    "MAX_HISTORY_ENTRIES",
    "MAX_RETRIES",
    "AnswerPayload",
    "ApiRequestError",
    "ConversationEntry",
    "ConversationHistory",
    "RetryPolicy",
    "SessionState",
    "SheNurturesClient",
    "decode_audio",
]
