# ============================================================================
# src/lab_charting/extraction/gemini_client.py
# ============================================================================
"""
Gemini Extraction Client

Sends a whole batch of PDF lab reports in one generateContent call:
the prompt text, then per document a "--- FILE: <name> ---" marker and
the PDF as inline base64 data. The response mime type is forced to JSON
and the model is asked for an array with one object per file.

Setup:
    export LAB_CHARTING_GEMINI_API_KEY=...
"""

import asyncio
import base64
from typing import Any, Dict, List, Optional, Sequence
import time

import aiohttp

from ..config import ExtractionSettings
from ..utils.exceptions import ExtractionError
from .base import BaseExtractionClient, ExtractionDocument
from .prompts import build_request_parts


class GeminiExtractionClient(BaseExtractionClient):
    """
    Generative Language API client for batched lab report extraction.

    Settings used:
        GEMINI_API_KEY: API key (required for any call)
        GEMINI_MODEL: model id (default: gemini-2.5-flash)
        GEMINI_BASE_URL: API root
        REQUEST_TIMEOUT: seconds per request
    """

    def __init__(
        self,
        settings: ExtractionSettings,
        session: Optional[aiohttp.ClientSession] = None
    ):
        super().__init__()
        self.settings = settings
        self._model_name = settings.GEMINI_MODEL
        self.base_url = settings.GEMINI_BASE_URL.rstrip("/")

        # HTTP session (created lazily, tied to event loop)
        self._session = session
        self._owns_session = session is None
        self._session_loop: Optional[asyncio.AbstractEventLoop] = None

        self.logger.info(f"Initialized Gemini client: {self._model_name}")

    @property
    def model_name(self) -> str:
        return self._model_name

    def _api_key(self) -> str:
        key = self.settings.GEMINI_API_KEY.get_secret_value()
        if not key:
            raise ExtractionError("GEMINI_API_KEY is not configured")
        return key

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session for current event loop."""
        if not self._owns_session:
            return self._session

        current_loop = asyncio.get_running_loop()
        needs_new_session = (
            self._session is None
            or self._session.closed
            or self._session_loop != current_loop
        )

        if needs_new_session:
            if self._session is not None and not self._session.closed:
                await self._session.close()
            timeout = aiohttp.ClientTimeout(total=self.settings.REQUEST_TIMEOUT)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._session_loop = current_loop

        return self._session

    async def close(self):
        """Close HTTP session."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        self._session = None if self._owns_session else self._session
        self._session_loop = None

    @staticmethod
    def _encode(document: ExtractionDocument) -> Dict[str, str]:
        return {
            "filename": document.filename,
            "mime_type": document.mime_type,
            "data": base64.b64encode(document.content).decode("ascii"),
        }

    def build_payload(
        self,
        documents: Sequence[ExtractionDocument],
        instructions: str = ""
    ) -> Dict[str, Any]:
        parts = build_request_parts([self._encode(d) for d in documents], instructions)
        return {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {"responseMimeType": "application/json"},
        }

    @staticmethod
    def response_text(body: Dict[str, Any]) -> str:
        """
        Pull the generated text out of a generateContent response.

        Raises:
            ExtractionError: for API error bodies or responses without a candidate
        """
        error = body.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise ExtractionError(f"Gemini API error: {message}")

        try:
            parts = body["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as e:
            raise ExtractionError(f"Gemini response has no candidate content: {e}") from e

        return "".join(part.get("text", "") for part in parts if isinstance(part, dict))

    async def extract_batch(
        self,
        documents: Sequence[ExtractionDocument],
        instructions: str = ""
    ) -> List[Dict[str, Any]]:
        if not documents:
            return []

        url = f"{self.base_url}/models/{self._model_name}:generateContent"
        payload = self.build_payload(documents, instructions)
        start = time.time()

        session = await self._get_session()
        try:
            async with session.post(url, params={"key": self._api_key()}, json=payload) as response:
                body = await response.json(content_type=None)
        except aiohttp.ClientError as e:
            raise ExtractionError(f"Gemini request failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise ExtractionError(
                f"Gemini request timed out after {self.settings.REQUEST_TIMEOUT}s"
            ) from e

        if not isinstance(body, dict):
            raise ExtractionError(f"Unexpected Gemini response (HTTP {response.status})")
        if response.status >= 400 and not body.get("error"):
            raise ExtractionError(f"Gemini request failed with HTTP {response.status}")

        reports = self.parse_report_array(self.response_text(body))

        self._batch_count += 1
        self._document_count += len(documents)
        self.logger.info(
            f"Extracted {len(reports)} report(s) from {len(documents)} document(s) "
            f"in {time.time() - start:.1f}s"
        )
        return reports

    async def list_models(self) -> List[str]:
        """Names of the models that support generateContent for this key."""
        session = await self._get_session()
        try:
            async with session.get(
                f"{self.base_url}/models", params={"key": self._api_key()}
            ) as response:
                body = await response.json(content_type=None)
        except aiohttp.ClientError as e:
            raise ExtractionError(f"Model listing failed: {e}") from e

        if not isinstance(body, dict):
            raise ExtractionError("Unexpected model listing response")
        if body.get("error"):
            error = body["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise ExtractionError(f"Gemini API error: {message}")

        return [
            model.get("name", "")
            for model in body.get("models", [])
            if "generateContent" in (model.get("supportedGenerationMethods") or [])
        ]

    async def health_check(self) -> Dict[str, Any]:
        """
        Check the API key works and the configured model is available.
        """
        try:
            models = await self.list_models()
        except ExtractionError as e:
            return {
                "healthy": False,
                "model": self._model_name,
                "details": str(e),
                "models": [],
            }

        available = any(name.endswith(f"/{self._model_name}") or name == self._model_name for name in models)
        return {
            "healthy": available,
            "model": self._model_name,
            "details": (
                "Model available" if available
                else f"Model not found. Available: {models}"
            ),
            "models": models,
        }
