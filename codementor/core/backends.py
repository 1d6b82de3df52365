"""
CodeMentor - AI Backends
Thin async clients for the generative-AI providers. Each client sends one
schema-constrained request and returns the raw text payload.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from groq import APIError, AsyncGroq

from codementor.config import PROVIDER_GROQ, Settings
from codementor.core.errors import TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AIRequest:
    """A single request to the AI backend."""
    model: str
    contents: str
    response_schema: Dict[str, Any]
    system_instruction: Optional[str] = None


class AIBackend:
    """Interface shared by every provider client."""

    provider = "AI"

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key or ""

    def is_configured(self) -> bool:
        """Check if a credential is available."""
        return bool(self.api_key)

    async def generate(self, request: AIRequest) -> Optional[str]:
        """Send the request and return the text payload, or None when empty."""
        raise NotImplementedError


class GeminiBackend(AIBackend):
    """
    Google AI (Gemini) client.
    The response schema is enforced by the API through JSON mode.
    """

    provider = "Gemini"

    def __init__(self, api_key: Optional[str] = None):
        super().__init__(api_key)
        self._configured = False

    def _ensure_configured(self) -> None:
        if not self._configured:
            genai.configure(api_key=self.api_key)
            self._configured = True

    async def generate(self, request: AIRequest) -> Optional[str]:
        self._ensure_configured()
        model = genai.GenerativeModel(
            request.model,
            system_instruction=request.system_instruction
        )
        generation_config = genai.GenerationConfig(
            response_mime_type="application/json",
            response_schema=request.response_schema
        )
        try:
            response = await model.generate_content_async(
                request.contents,
                generation_config=generation_config
            )
        except google_exceptions.GoogleAPIError as e:
            raise TransportError(self.provider, str(e)) from e

        try:
            return response.text
        except ValueError:
            # No candidate parts, e.g. the prompt was blocked
            logger.warning("Gemini returned no text (finish reason unavailable)")
            return None


class GroqBackend(AIBackend):
    """
    Groq client.
    Groq only guarantees a JSON object, so the schema travels in the system
    instruction and is checked afterwards like any other payload.
    """

    provider = "Groq"

    def __init__(self, api_key: Optional[str] = None, client: Optional[AsyncGroq] = None):
        super().__init__(api_key)
        self._client = client

    def _get_client(self) -> AsyncGroq:
        if self._client is None:
            self._client = AsyncGroq(api_key=self.api_key)
        return self._client

    @staticmethod
    def _system_prompt(request: AIRequest) -> str:
        schema = json.dumps(request.response_schema, indent=2)
        parts = [request.system_instruction] if request.system_instruction else []
        parts.append(f"Respond with a single JSON object that matches this schema:\n{schema}")
        return "\n\n".join(parts)

    async def generate(self, request: AIRequest) -> Optional[str]:
        try:
            completion = await self._get_client().chat.completions.create(
                model=request.model,
                messages=[
                    {"role": "system", "content": self._system_prompt(request)},
                    {"role": "user", "content": request.contents},
                ],
                response_format={"type": "json_object"},
                temperature=0.3
            )
        except APIError as e:
            raise TransportError(self.provider, str(e)) from e

        if not completion.choices:
            return None
        return completion.choices[0].message.content


def create_backend(settings: Settings) -> AIBackend:
    """Create the backend client for the configured provider."""
    if settings.provider == PROVIDER_GROQ:
        return GroqBackend(settings.groq_api_key)
    return GeminiBackend(settings.gemini_api_key)
