"""Gift ideas for a drawn recipient, asked of the Anthropic Messages API.

Display-only: nothing in the draw depends on these strings, so every
failure degrades to a fixed list instead of reaching the caller.
"""

from __future__ import annotations

import json
import logging

import anthropic
from anthropic import APIError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-haiku-4-5"

# Served when no API key is configured.
NO_KEY_IDEAS = [
    "A lump of coal (premium edition)",
    "Ugly sweater with flashing lights",
    "Fruitcake from 1995",
]

# Served when the API call or its answer goes wrong.
FALLBACK_IDEAS = [
    "A singing fish plaque",
    "Socks with your face on them",
    "Emergency hot cocoa kit",
]

PROMPT = (
    "Give me 3 funny, slightly tacky, and creative Secret Santa gift ideas for someone named {name}. "
    "The tone should be cheeky, playful, and Christmas-themed. Keep them short (under 10 words each). "
    'Answer with only a JSON object of the form {{"ideas": ["...", "...", "..."]}}.'
)


def parse_ideas(text: str) -> list[str]:
    """Pull the ``ideas`` list out of the model's JSON answer.

    Raises ValueError when the answer is not the expected shape.
    """
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end < start:
        raise ValueError("No JSON object in gift idea answer")
    payload = json.loads(text[start:end + 1])
    ideas = payload.get("ideas") if isinstance(payload, dict) else None
    if not isinstance(ideas, list):
        raise ValueError("Gift idea answer has no 'ideas' list")
    return [str(idea).strip() for idea in ideas if str(idea).strip()]


class GiftIdeaProvider:
    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 300,
        timeout_seconds: float = 20.0,
        client=None,
    ):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.timeout_seconds = timeout_seconds
        # A client passed in stays open; one we build is closed after each call.
        self.client = client

    async def suggest(self, name: str) -> list[str]:
        if self.client is not None:
            return await self._ask(self.client, name)
        if not self.api_key:
            logger.warning("No Anthropic API key configured, returning default gift ideas")
            return list(NO_KEY_IDEAS)

        async with anthropic.AsyncAnthropic(api_key=self.api_key, timeout=self.timeout_seconds) as client:
            return await self._ask(client, name)

    async def _ask(self, client, name: str) -> list[str]:
        try:
            response = await client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": PROMPT.format(name=name)}],
            )
            text = "".join(
                block.text for block in response.content if getattr(block, "type", None) == "text"
            )
            ideas = parse_ideas(text)
        except (APIError, ValueError) as e:
            logger.warning("Gift idea lookup failed: %s", e)
            return list(FALLBACK_IDEAS)

        return ideas or list(FALLBACK_IDEAS)
