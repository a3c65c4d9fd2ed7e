import asyncio
import json

import httpx
import pytest

from fatefi.providers import OracleClient
from fatefi.providers.oracle.client import (FALLBACK_INTERPRETATIONS,
                                            build_prompt, fallback_for,
                                            parse_interpretation)

READING = {
    "prediction": "Towers fall.",
    "narrative": "Sudden change shakes the market.",
    "confidence_tone": "Ominous",
    "disclaimer": "Entertainment only.",
    "cosmic_tip": "Hedge your bets.",
}


def _client(handler, token=None, **kwargs) -> OracleClient:
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="http://oracle.test"
    )
    return OracleClient("http://oracle.test", token=token, client=client, **kwargs)


def test_parse_interpretation_extracts_embedded_json():
    content = "Here is your reading:\n```json\n" + json.dumps(READING) + "\n```"
    interpretation = parse_interpretation(content)
    assert interpretation.prediction == "Towers fall."
    assert interpretation.cosmic_tip == "Hedge your bets."


@pytest.mark.parametrize(
    "content",
    [
        "",
        "the stars are silent",
        "{not json}",
        json.dumps({**READING, "disclaimer": "   "}),
        json.dumps({k: v for k, v in READING.items() if k != "narrative"}),
    ],
)
def test_parse_interpretation_rejects(content):
    with pytest.raises(ValueError):
        parse_interpretation(content)


def test_parse_interpretation_rejects_content_parts():
    parts = [{"type": "text", "text": json.dumps(READING)}]
    with pytest.raises(ValueError):
        parse_interpretation(parts)


def test_build_prompt_includes_context_when_given():
    assert "Market Context: up 2%" in build_prompt("The Sun", "upright", "up 2%")
    assert "Market Context" not in build_prompt("The Sun", "upright")


def test_fallback_for_unknown_orientation_is_upright():
    assert fallback_for("sideways") == FALLBACK_INTERPRETATIONS["upright"]
    assert fallback_for("reversed") == FALLBACK_INTERPRETATIONS["reversed"]


async def test_get_interpretation_posts_chat_request():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        content = json.dumps(READING)
        return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})

    oracle = _client(handler, token="s3cret")
    interpretation = await oracle.get_interpretation("The Tower", "reversed")
    await oracle.close()

    assert interpretation.narrative == READING["narrative"]
    assert seen["path"] == "/v1/chat/completions"
    assert seen["auth"] == "Bearer s3cret"
    assert "Card: The Tower" in seen["body"]["messages"][1]["content"]


@pytest.mark.parametrize(
    "handler",
    [
        lambda request: httpx.Response(500),
        lambda request: httpx.Response(200, text="<html>"),
        lambda request: httpx.Response(200, json={"choices": []}),
        lambda request: httpx.Response(200, json={"choices": [{"message": {"content": "no"}}]}),
        lambda request: httpx.Response(
            200, json={"choices": [{"message": {"content": [{"type": "text", "text": "hi"}]}}]}
        ),
        lambda request: httpx.Response(200, json={"choices": 5}),
        lambda request: httpx.Response(200, json={"choices": ["hi"]}),
        lambda request: httpx.Response(200, json=[1, 2]),
    ],
)
async def test_get_interpretation_falls_back(handler):
    oracle = _client(handler)
    interpretation = await oracle.get_interpretation("The Tower", "reversed")
    assert interpretation == FALLBACK_INTERPRETATIONS["reversed"]


async def test_get_interpretation_falls_back_on_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    oracle = _client(handler)
    assert await oracle.get_interpretation("The Sun", "upright") == FALLBACK_INTERPRETATIONS["upright"]


async def test_get_interpretation_bounds_whole_request():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(1)
        return httpx.Response(200, json={"choices": [{"message": {"content": json.dumps(READING)}}]})

    oracle = _client(handler, timeout=0.05)
    assert await oracle.get_interpretation("The Moon", "reversed") == FALLBACK_INTERPRETATIONS["reversed"]
