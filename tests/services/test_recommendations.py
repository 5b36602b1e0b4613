"""Recommendation endpoint: seed validation, rate limiting, LLM reply parsing.

Invariants:
    - 1..5 non-blank titles, else 400 and no LLM call
    - Rate limited per user before the LLM is called
    - Malformed model output -> 500 RECOMMENDATION_PARSE_FAILED
    - LLM outages surface as 503 EXTERNAL_SERVICE_ERROR
"""

from bookcircle.core.errors import ExternalServiceError
from tests.services.fakes import ALICE, auth

RECS = "/api/v1/recommendations"


async def test_returns_parsed_recommendations(client, text_generator):
    resp = await client.post(
        RECS, json={"titles": ["Dune", " Neuromancer "]}, headers=auth(ALICE),
    )
    assert resp.status_code == 200
    recs = resp.json()
    assert [r["title"] for r in recs] == ["Dune", "Hyperion", "Foundation"]
    assert recs[1] == {
        "title": "Hyperion",
        "author": "Dan Simmons",
        "description": "Pilgrims and the Shrike.",
    }
    assert "Dune, Neuromancer" in text_generator.prompts[0]


async def test_requires_auth(client):
    resp = await client.post(RECS, json={"titles": ["Dune"]})
    assert resp.status_code == 401


async def test_empty_titles_is_400_without_llm_call(client, text_generator):
    resp = await client.post(RECS, json={"titles": ["  "]}, headers=auth(ALICE))
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
    assert text_generator.prompts == []


async def test_more_than_five_titles_is_400(client, text_generator):
    titles = [f"Book {i}" for i in range(6)]
    resp = await client.post(RECS, json={"titles": titles}, headers=auth(ALICE))
    assert resp.status_code == 400
    assert text_generator.prompts == []


async def test_malformed_reply_is_500(client, text_generator):
    text_generator.reply = "Sorry, I can't help with that."
    resp = await client.post(RECS, json={"titles": ["Dune"]}, headers=auth(ALICE))
    assert resp.status_code == 500
    assert resp.json()["error"]["code"] == "RECOMMENDATION_PARSE_FAILED"


async def test_empty_reply_is_empty_list(client, text_generator):
    text_generator.reply = ""
    resp = await client.post(RECS, json={"titles": ["Dune"]}, headers=auth(ALICE))
    assert resp.status_code == 200
    assert resp.json() == []


async def test_llm_outage_is_503(client, text_generator):
    text_generator.error = ExternalServiceError("Anthropic API", "down", "connection_error")
    resp = await client.post(RECS, json={"titles": ["Dune"]}, headers=auth(ALICE))
    assert resp.status_code == 503
    assert resp.json()["error"]["code"] == "EXTERNAL_SERVICE_ERROR"


async def test_rate_limited_before_llm_call(client, rate_limiter, text_generator):
    for _ in range(5):
        await rate_limiter.limit(ALICE.id)
    resp = await client.post(RECS, json={"titles": ["Dune"]}, headers=auth(ALICE))
    assert resp.status_code == 429
    assert text_generator.prompts == []
