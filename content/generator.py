"""The single boundary to the generative model.

Every call returns a ``Generation``. Nothing raised by the model SDK crosses
this boundary: transport problems become ``GenerationTransportError`` and
unusable responses become ``GenerationDecodeError``. There is no retry; the
caller decides what to do with a failure.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from google import genai
from google.genai import types

from config import DEFAULT_MODEL
from errors import GenerationDecodeError, GenerationError, GenerationTransportError
from models import ConversationTurn, TurnRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Generation:
    """Outcome of one generator call: content or an error, never both."""

    text: str | None = None
    data: Any = None
    error: GenerationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        """Return the decoded content, raising the carried error on failure.

        Structured requests return the parsed JSON value, plain requests
        return the text.
        """
        if self.error is not None:
            raise self.error
        return self.data if self.data is not None else self.text


class ContentGenerator:
    """Async client for the model service.

    Args:
        client: A ``google.genai.Client``. Created lazily from ``api_key``
            when omitted.
        model: Model name used for every request.
        api_key: Key used to build the client on first use.
    """

    def __init__(
        self,
        client: genai.Client | None = None,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
    ):
        self._client = client
        self.model = model
        self.api_key = api_key

    async def generate(
        self,
        prompt: str,
        schema: types.Schema | None = None,
        system_instruction: str | None = None,
    ) -> Generation:
        """Request content for a prompt.

        Args:
            prompt: The user prompt.
            schema: When given, the response is requested as JSON of this
                shape and parsed before returning.
            system_instruction: Optional persona or behaviour instruction.

        Returns:
            A Generation holding text (no schema), parsed JSON (schema) or
            the error.
        """
        return await self._run(prompt, schema, system_instruction)

    async def reply(
        self,
        turns: list[ConversationTurn],
        system_instruction: str | None = None,
    ) -> Generation:
        """Request the next assistant line for a conversation transcript."""
        contents = [
            types.Content(
                role="model" if turn.role == TurnRole.ASSISTANT else "user",
                parts=[types.Part.from_text(text=turn.text)],
            )
            for turn in turns
        ]
        return await self._run(contents, None, system_instruction)

    async def _run(
        self,
        contents: Any,
        schema: types.Schema | None,
        system_instruction: str | None,
    ) -> Generation:
        try:
            raw = await self._request(contents, schema, system_instruction)
        except Exception as e:
            logger.exception("Content generation request failed")
            return Generation(error=GenerationTransportError(str(e) or type(e).__name__))

        text = (raw or "").strip()
        if not text:
            logger.warning("Model returned an empty response")
            return Generation(error=GenerationDecodeError("empty response"))
        if schema is None:
            return Generation(text=text)

        try:
            data = json.loads(_extract_json_text(text))
        except ValueError as e:
            logger.warning("Model returned invalid JSON: %s", text[:200])
            return Generation(error=GenerationDecodeError(f"invalid JSON: {e}"))
        return Generation(text=text, data=data)

    async def _request(
        self,
        contents: Any,
        schema: types.Schema | None,
        system_instruction: str | None,
    ) -> str | None:
        """Send one request to the model service and return its raw text."""
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            response_mime_type="application/json" if schema is not None else None,
            response_schema=schema,
        )
        response = await self._get_client().aio.models.generate_content(
            model=self.model,
            contents=contents,
            config=config,
        )
        return response.text

    def _get_client(self) -> genai.Client:
        if self._client is None:
            if not self.api_key:
                raise RuntimeError("GEMINI_API_KEY is not configured")
            self._client = genai.Client(api_key=self.api_key)
        return self._client


def _extract_json_text(raw: str) -> str:
    """Strip a markdown code fence the model sometimes wraps JSON in."""
    s = raw.strip()
    if s.startswith("```"):
        s = s.strip("`").strip()
        if s.lower().startswith("json"):
            s = s[4:].strip()
    return s
