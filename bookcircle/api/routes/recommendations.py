"""Recommendation Routes: LLM book recommendations from seed titles."""

from fastapi import APIRouter, Depends

from bookcircle.api.dependencies import (
    get_current_user_id, get_mutation_guard, get_text_generator,
)
from bookcircle.config import Settings, get_settings
from bookcircle.core.service_protocols import TextGenerator
from bookcircle.schemas.recommendation import RecommendationOut, RecommendationRequest
from bookcircle.services.guard_mutations import MutationGuard
from bookcircle.services.handle_recommendations import generate_recommendations

router = APIRouter(prefix="/api/v1/recommendations", tags=["recommendations"])


@router.post("", response_model=list[RecommendationOut])
async def create_recommendations(
    body: RecommendationRequest,
    user_id: str = Depends(get_current_user_id),
    guard: MutationGuard = Depends(get_mutation_guard),
    generator: TextGenerator = Depends(get_text_generator),
    settings: Settings = Depends(get_settings),
):
    recs = await generate_recommendations(
        body.titles, user_id, guard, generator,
        max_titles=settings.recommendation_max_titles,
    )
    return [RecommendationOut.model_validate(r) for r in recs]
