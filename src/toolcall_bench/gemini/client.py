"""Gemini transport: one model call with timeout and transient-error backoff."""

import asyncio
import re
from typing import Any, List, Optional

from google import genai
from google.genai import types
from google.genai.client import AsyncClient

from ..config import resolve_request_timeout_ms
from ..core.contracts import ModelFunctionCall, ModelRequest, ModelResult
from ..core.exceptions import ModelTimeoutError, TransientModelError
from ..core.logger import get_logger

logger = get_logger(__name__)

MAX_TRANSIENT_RETRIES = 2

_TRANSIENT_MARKERS = ("RESOURCE_EXHAUSTED", "RATE_LIMIT", "SERVICE_UNAVAILABLE")
_TRANSIENT_CODE = re.compile(r'(?:"CODE"\s*:\s*|^)(429|503)\b')
_RETRY_DELAY_FIELD = re.compile(r"""["']retryDelay["']\s*:\s*["'](\d+(?:\.\d+)?)s["']""", re.IGNORECASE)
_RETRY_IN = re.compile(r"retry in\s+([0-9]+(?:\.[0-9]+)?)s", re.IGNORECASE)


def is_transient_error(error: BaseException) -> bool:
    """Classify a transport failure as rate-limit / service-unavailable."""
    if isinstance(error, ModelTimeoutError):
        return False
    if getattr(error, "code", None) in (429, 503):
        return True

    upper = str(error).upper()
    if any(marker in upper for marker in _TRANSIENT_MARKERS):
        return True
    return _TRANSIENT_CODE.search(upper.strip()) is not None


def extract_retry_delay(message: str) -> Optional[float]:
    """Return the provider's retry-after hint in seconds, if the error text carries one."""
    match = _RETRY_DELAY_FIELD.search(message)
    if match:
        seconds = float(match.group(1))
        if seconds > 0:
            return seconds

    match = _RETRY_IN.search(message)
    if match:
        seconds = float(match.group(1))
        if seconds > 0:
            return seconds

    return None


class GeminiModelClient:
    """
    Model-call capability backed by the Google GenAI async client.

    Each call is bounded by a request timeout and retried only on transient errors.
    """

    def __init__(
        self,
        aclient: AsyncClient,
        request_timeout_ms: Optional[int] = None,
        max_transient_retries: int = MAX_TRANSIENT_RETRIES,
        base_retry_delay: float = 2.0,
    ):
        """
        Initializes the Gemini transport.

        Args:
            aclient: The initialized Google GenAI async client.
            request_timeout_ms: Per-request timeout; defaults to GEMINI_REQUEST_TIMEOUT_MS or 45s.
            max_transient_retries: Retries allowed for transient failures.
            base_retry_delay: Seconds multiplied by the attempt number when no retry hint is given.
        """
        self.client = aclient
        self.request_timeout_ms = request_timeout_ms or resolve_request_timeout_ms()
        self.max_transient_retries = max_transient_retries
        self.base_retry_delay = base_retry_delay

    @classmethod
    def from_api_key(cls, api_key: str, **kwargs: Any) -> "GeminiModelClient":
        return cls(genai.Client(api_key=api_key).aio, **kwargs)

    async def generate_content(self, request: ModelRequest) -> ModelResult:
        response = await self._generate_with_retry(request)
        return self._to_model_result(response)

    async def _generate_with_retry(self, request: ModelRequest) -> types.GenerateContentResponse:
        """
        Executes one request, retrying transient failures.

        Raises:
            ModelTimeoutError: If the request timed out.
            TransientModelError: If transient retries are exhausted.
            Exception: The original error when it is not transient.
        """
        for attempt in range(self.max_transient_retries + 1):
            try:
                return await self._generate_once(request)
            except Exception as e:
                if not is_transient_error(e):
                    raise

                hint = extract_retry_delay(str(e))
                if attempt == self.max_transient_retries:
                    logger.error(f"Transient Gemini error persisted after {attempt + 1} call(s): {e}")
                    raise TransientModelError(str(e), retry_after=hint) from e

                delay = hint or self.base_retry_delay * (attempt + 1)
                logger.warning(
                    f"Transient Gemini error (Retry: {attempt + 1}/{self.max_transient_retries}): {e}. "
                    f"Waiting {delay}s..."
                )
                await asyncio.sleep(delay)

        raise RuntimeError("unreachable: transient retry loop exited without result")

    async def _generate_once(self, request: ModelRequest) -> types.GenerateContentResponse:
        try:
            return await asyncio.wait_for(
                self.client.models.generate_content(
                    model=request.model,
                    contents=request.contents,
                    config=request.config,
                ),
                timeout=self.request_timeout_ms / 1000,
            )
        except asyncio.TimeoutError as exc:
            msg = f"Gemini request timed out after {self.request_timeout_ms}ms"
            logger.error(msg)
            raise ModelTimeoutError(msg) from exc

    @staticmethod
    def _to_model_result(response: types.GenerateContentResponse) -> ModelResult:
        parts = _first_candidate_parts(response)
        text = "".join(p.text for p in parts if isinstance(p.text, str) and not p.thought)
        thoughts = [p.text.strip() for p in parts if p.thought and isinstance(p.text, str) and p.text.strip()]
        calls = [
            ModelFunctionCall(id=call.id, name=call.name, args=call.args) for call in (response.function_calls or [])
        ]
        return ModelResult(text=text, function_calls=calls, thoughts=thoughts, raw=response)


def _first_candidate_parts(response: types.GenerateContentResponse) -> List[types.Part]:
    candidates = response.candidates or []
    if not candidates or candidates[0].content is None:
        return []
    return list(candidates[0].content.parts or [])
