"""Recommendation Service: validate seeds, rate limit, call the LLM, parse the reply.

Invariants:
    - Seed validation runs before the rate limiter and the LLM call
    - Rate limit checked before the LLM call, so refused requests cost nothing
"""

import logging

from bookcircle.core.domain_types import UserId
from bookcircle.core.errors import RecommendationParseError
from bookcircle.core.recommendation_format import (
    Recommendation,
    build_recommendation_prompt,
    normalize_seed_titles,
    parse_recommendations,
)
from bookcircle.core.service_protocols import TextGenerator
from bookcircle.services.guard_mutations import MutationGuard

logger = logging.getLogger(__name__)


async def generate_recommendations(
    titles: list[str],
    user_id: UserId,
    guard: MutationGuard,
    generator: TextGenerator,
    max_titles: int = 5,
) -> list[Recommendation]:
    seeds = normalize_seed_titles(titles, max_titles)
    await guard.enforce_rate_limit(user_id)
    raw = await generator.generate(build_recommendation_prompt(seeds))
    try:
        return parse_recommendations(raw)
    except RecommendationParseError:
        logger.error(
            "Unparseable recommendation reply",
            extra={"user_id": user_id},
        )
        raise
