"""
voicenote.llm.postprocess - Best-effort rewrite of transcribed text.

Sends the transcription to an OpenAI-compatible completion endpoint with
the user's instruction template. Chat-family models get a chat request,
everything else a plain completion request. Any failure returns the
original text untouched.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from voicenote.client import POST_PROCESSING_TIMEOUT, bearer_headers, client_session
from voicenote.config import PostProcessingConfig
from voicenote.exceptions import PostProcessingError
from voicenote.models import RequestShape

logger = logging.getLogger(__name__)


def build_request(text: str, config: PostProcessingConfig) -> tuple[str, dict[str, Any]]:
    """Build the endpoint URL and JSON body for a rewrite request.

    Args:
        text: Transcribed text
        config: Post-processing settings

    Returns:
        (url, request body)
    """
    shape = RequestShape.for_model(config.model)
    url = f"{config.api_base}{shape.endpoint_path}"

    if shape is RequestShape.CHAT:
        body = {
            "model": config.model,
            "messages": [
                {"role": "system", "content": config.custom_prompt},
                {"role": "user", "content": text},
            ],
        }
    else:
        body = {
            "model": config.model,
            "prompt": f"{config.custom_prompt}\n\n{text}",
        }
    return url, body


def extract_text(payload: Any) -> str:
    """Pull generated text out of a completion or chat response.

    ``choices[0].text`` wins over ``choices[0].message.content``.

    Raises:
        PostProcessingError: If neither field holds any text
    """
    choices = payload.get("choices") if isinstance(payload, dict) else None
    if not isinstance(choices, list) or not choices:
        raise PostProcessingError("Response has no choices")

    first = choices[0]
    if not isinstance(first, dict):
        raise PostProcessingError("Malformed choice in response")

    candidate = first.get("text")
    if not isinstance(candidate, str) or not candidate:
        message = first.get("message")
        candidate = message.get("content") if isinstance(message, dict) else None

    if not isinstance(candidate, str) or not candidate.strip():
        raise PostProcessingError("Response choice has no text")
    return candidate.strip()


class PostProcessor:
    """Optional LLM rewrite pass over transcribed text."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: httpx.Timeout = POST_PROCESSING_TIMEOUT,
    ) -> None:
        self.client = client
        self.timeout = timeout

    async def process(self, text: str, config: PostProcessingConfig) -> str:
        """Rewrite text, or return it unchanged when disabled or on failure.

        Never raises for request or response problems.
        """
        if not config.enabled or not text:
            return text

        url, body = build_request(text, config)
        logger.debug("Post-processing %d chars with %s via %s", len(text), config.model, url)

        try:
            async with client_session(self.client, self.timeout) as session:
                response = await session.post(
                    url,
                    json=body,
                    headers=bearer_headers(config.api_key),
                    timeout=self.timeout,
                )
                response.raise_for_status()
                return extract_text(response.json())
        except (httpx.HTTPError, ValueError, PostProcessingError) as e:
            logger.warning("Error during postprocessing: %s", e)
            return text
