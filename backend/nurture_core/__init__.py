from .catalog import SYMPTOM_CATEGORIES, SYMPTOM_DESCRIPTIONS, SymptomCatalog, SymptomCategory
from .config import Settings, bootstrap_local_env, load_settings
from .errors import ConfigurationError, FallbackTextError, ProviderError
from .fallback import GENERAL_FALLBACK_TEXT, SYMPTOM_FALLBACK_TEXT, FallbackProvider
from .models import (
    PIPELINE_STAGES,
    RULE_NAMES,
    AudioResult,
    GeneratedResponse,
    Mode,
    PipelineOutcome,
    PromptPair,
    ValidationResult,
    ValidationRules,
)
from .pipeline import ResponsePipeline
from .prompts import MAX_QUESTION_CHARS, PromptBuilder, truncate_question
from .sanitizer import sanitize_response
from .validator import DEFAULT_RULES, ResponseValidator

__all__ = [
    "DEFAULT_RULES",
    "GENERAL_FALLBACK_TEXT",
    "MAX_QUESTION_CHARS",
    "PIPELINE_STAGES",
    "RULE_NAMES",
    "SYMPTOM_CATEGORIES",
    "SYMPTOM_DESCRIPTIONS",
    "SYMPTOM_FALLBACK_TEXT",
    "AudioResult",
    "ConfigurationError",
    "FallbackProvider",
    "FallbackTextError",
    "GeneratedResponse",
    "Mode",
    "PipelineOutcome",
    "PromptBuilder",
    "PromptPair",
    "ProviderError",
    "ResponsePipeline",
    "ResponseValidator",
    "Settings",
    "SymptomCatalog",
    "SymptomCategory",
    "ValidationResult",
    "ValidationRules",
    "bootstrap_local_env",
    "load_settings",
    "sanitize_response",
    "truncate_question",
]
