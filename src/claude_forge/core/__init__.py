"""Detection, generation and validation of assistant configuration."""

from claude_forge.core.detector import LanguageDetector, LanguageNotDetectedError, detect_language
from claude_forge.core.generator import ConfigGenerator
from claude_forge.core.validator import ConfigValidator, ValidationSummary

__all__ = [
    "ConfigGenerator",
    "ConfigValidator",
    "LanguageDetector",
    "LanguageNotDetectedError",
    "ValidationSummary",
    "detect_language",
]
