"""
Generative backend abstraction.

Model names come from config only (default.yaml → AdapterSettings).
"""

from .base import AdapterSettings, GenerativeBackend
from .gemini import GeminiBackend, classify_error

__all__ = [
    "AdapterSettings",
    "GenerativeBackend",
    "GeminiBackend",
    "classify_error",
]
