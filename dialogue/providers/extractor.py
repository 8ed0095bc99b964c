"""Language-model extractor for free-text answers the menus don't match.

Talks to Claude (Anthropic Messages API) or a local Ollama server over
httpx.  The model is asked for a single token answer; anything outside the
allowed values comes back as ``"UNCLEAR"``.
"""

from __future__ import annotations

import logging

import httpx

from dialogue.errors import CollaboratorFailure
from dialogue.providers.base import Extractor

log = logging.getLogger("dialogue.providers.extractor")

UNCLEAR = "UNCLEAR"

ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"

PROMPTS: dict[str, str] = {
    "category": (
        "A client of a commercial real-estate firm wrote: \"{text}\". "
        "Which kind of property are they interested in? Answer with exactly "
        "one word: office, shop, warehouse or all. The message may be in "
        "English or Marathi. If it is not clear, answer UNCLEAR."
    ),
}

ALLOWED: dict[str, frozenset[str]] = {
    "category": frozenset({"office", "shop", "warehouse", "all"}),
}


class LLMExtractor(Extractor):
    def __init__(
        self,
        provider: str,
        api_key: str = "",
        model: str = "",
        ollama_url: str = "http://localhost:11434",
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if provider not in ("claude", "ollama"):
            raise ValueError(f"Unsupported LLM provider {provider!r}")
        if provider == "claude" and not api_key:
            raise ValueError("An Anthropic API key is required for the claude provider.")
        self._provider = provider
        self._api_key = api_key
        self._model = model
        self._ollama_url = ollama_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    async def _post(self, url: str, payload: dict, headers: dict[str, str]) -> dict:
        if self._client is not None:
            resp = await self._client.post(url, json=payload, headers=headers)
            resp.raise_for_status()
            return resp.json()
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            resp = await client.post(url, json=payload, headers=headers)
            resp.raise_for_status()
            return resp.json()

    async def _complete(self, prompt: str) -> str:
        if self._provider == "claude":
            data = await self._post(
                ANTHROPIC_URL,
                {
                    "model": self._model,
                    "max_tokens": 10,
                    "messages": [{"role": "user", "content": prompt}],
                },
                {"x-api-key": self._api_key, "anthropic-version": ANTHROPIC_VERSION},
            )
            blocks = data.get("content", [])
            return "".join(b.get("text", "") for b in blocks if b.get("type") == "text")

        data = await self._post(
            f"{self._ollama_url}/api/generate",
            {"model": self._model, "prompt": prompt, "stream": False},
            {},
        )
        return data.get("response", "")

    async def extract(self, kind: str, text: str) -> str:
        template = PROMPTS.get(kind)
        if template is None:
            raise ValueError(f"No extraction prompt for {kind!r}")
        try:
            answer = await self._complete(template.format(text=text))
        except (httpx.HTTPError, ValueError) as exc:
            log.warning("LLM extraction (%s) failed: %s", kind, exc)
            raise CollaboratorFailure("extractor", exc) from exc

        value = answer.strip().strip(".\"'").lower()
        if value in ALLOWED.get(kind, frozenset()):
            log.debug("LLM extracted %s=%s", kind, value)
            return value
        return UNCLEAR
