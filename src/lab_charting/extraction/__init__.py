"""
Extraction service clients.
"""

from .base import BaseExtractionClient, ExtractionDocument
from .gemini_client import GeminiExtractionClient
from .prompts import build_batch_prompt

__all__ = [
    "BaseExtractionClient",
    "ExtractionDocument",
    "GeminiExtractionClient",
    "build_batch_prompt",
]
