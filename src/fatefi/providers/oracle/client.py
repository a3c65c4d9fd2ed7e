"""Narrative generator: tarot readings from an OpenAI-compatible chat endpoint."""
import asyncio
import json
import logging
import re

import httpx
from pydantic import ValidationError

from fatefi.schemas import Interpretation

logger = logging.getLogger(__name__)

_DISCLAIMER = "⚠️ This is entertainment only. Not financial advice. Always DYOR."

FALLBACK_INTERPRETATIONS: dict[str, Interpretation] = {
    "upright": Interpretation(
        prediction=(
            "The cosmic energies suggest a rising tide, an upward momentum "
            "building beneath the surface of the markets."
        ),
        narrative=(
            "The card drawn upright channels pure ascending energy. Like a bullish "
            "candle breaking through resistance, the universe hints at gains for "
            "those bold enough to ride the wave."
        ),
        confidence_tone="Mystically Bullish 🔮📈",
        disclaimer=_DISCLAIMER,
    ),
    "reversed": Interpretation(
        prediction=(
            "Reversed energies signal turbulence ahead. The market spirits are "
            "restless and unpredictable."
        ),
        narrative=(
            "When the card falls reversed, it speaks of bearish undercurrents and "
            "hidden volatility. Caution is the arcana's counsel tonight."
        ),
        confidence_tone="Cosmically Cautious 🌙📉",
        disclaimer=_DISCLAIMER,
    ),
}

SYSTEM_PROMPT = (
    "You are FateFi's mystical AI oracle. You generate symbolic tarot "
    "interpretations framed as entertainment market predictions. Your tone is "
    "dramatic, mystical, and engaging, like a crypto-native fortune teller. "
    "Always include a disclaimer that this is entertainment only and not "
    "financial advice. Respond in valid JSON with these exact keys: prediction, "
    "narrative, confidence_tone, disclaimer. You may add market_mood, key_levels "
    "and cosmic_tip."
)

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def fallback_for(orientation: str) -> Interpretation:
    """Static reading for an orientation; unknown values get the upright one."""
    return FALLBACK_INTERPRETATIONS.get(orientation, FALLBACK_INTERPRETATIONS["upright"])


def build_prompt(card_name: str, orientation: str, market_context: str | None = None) -> str:
    lines = [f"Card: {card_name}", f"Orientation: {orientation}"]
    if market_context:
        lines.append(f"Market Context: {market_context}")
    lines.append("")
    lines.append(
        "Generate a mystical, engaging tarot interpretation framed as an "
        "entertainment market prediction for ETH."
    )
    lines.append(
        "Respond as valid JSON with keys: prediction, narrative, confidence_tone, disclaimer."
    )
    return "\n".join(lines)


def parse_interpretation(content: str) -> Interpretation:
    """Decode the first JSON object in content and validate it.

    Raises:
        ValueError: content is not text, has no JSON object, is malformed JSON,
            or a required field is missing/empty.
    """
    if not isinstance(content, str):
        # e.g. a list of content parts
        raise ValueError(f"Oracle content is {type(content).__name__}, not text")
    match = _JSON_OBJECT.search(content)
    if not match:
        raise ValueError("No JSON object in oracle response")
    payload = json.loads(match.group(0))
    if not isinstance(payload, dict):
        raise ValueError("Oracle response is not a JSON object")
    return Interpretation.model_validate(payload)


class OracleClient:
    """Client for the narrative service; never raises to callers."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        model: str = "default",
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._model = model
        self._timeout = timeout
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"), headers=headers, timeout=timeout
        )

    async def get_interpretation(
        self,
        card_name: str,
        orientation: str,
        market_context: str | None = None,
    ) -> Interpretation:
        """Ask the oracle for a reading; any failure yields the static fallback."""
        payload = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": build_prompt(card_name, orientation, market_context),
                },
            ],
            "temperature": 0.9,
            "max_tokens": 500,
        }
        try:
            response = await asyncio.wait_for(
                self._client.post("/v1/chat/completions", json=payload),
                timeout=self._timeout,
            )
            response.raise_for_status()
            data = response.json()
            if not isinstance(data, dict):
                raise ValueError("Oracle response is not a JSON object")
            choice = (data.get("choices") or [{}])[0]
            content = (choice.get("message") or {}).get("content") or ""
            return parse_interpretation(content)
        except (
            httpx.HTTPError,
            asyncio.TimeoutError,
            ValueError,
            ValidationError,
            AttributeError,
            TypeError,
            LookupError,
        ) as exc:
            # json.JSONDecodeError is a ValueError
            logger.warning("Oracle unavailable, using fallback interpretation: %s", exc)
            return fallback_for(orientation)

    async def close(self) -> None:
        await self._client.aclose()
