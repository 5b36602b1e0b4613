"""Recommendation Schemas: seed titles in, parsed recommendations out.

Invariants:
    - Count and blank-title rules enforced in core/recommendation_format.py
      so they surface as VALIDATION_ERROR with a field name
"""

from pydantic import BaseModel, ConfigDict, Field


class RecommendationRequest(BaseModel):
    titles: list[str] = Field(default_factory=list)


class RecommendationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str
    author: str
    description: str
