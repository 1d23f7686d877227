"""Data models for purchase recommendations."""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List

from pydantic import BaseModel, Field, field_validator

from cardsense.analysis.models import CardAnalysis


class Priority(str, Enum):
    """What the user optimizes a purchase for."""
    REWARDS = "rewards"
    SAFETY = "safety"
    BALANCE = "balance"


class RecommendationRequest(BaseModel):
    """Pydantic schema for a purchase to route."""
    category: str = Field(min_length=1, description="Spending category of the purchase")
    amount: Decimal = Field(gt=0, description="Purchase amount in the statement currency")
    priority: Priority = Field(default=Priority.BALANCE, description="Ranking mode")
    
    @field_validator("category")
    @classmethod
    def strip_category(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("category must not be blank")
        return value


@dataclass(frozen=True)
class Alternative:
    """Runner-up card with a short justification."""
    card: CardAnalysis
    reason: str
    
    def to_dict(self) -> dict:
        return {"card_id": self.card.card_id, "name": self.card.name, "reason": self.reason}


@dataclass(frozen=True)
class Recommendation:
    """Card selected for a purchase."""
    selected_card: CardAnalysis
    reasoning: List[str]
    projected_utilization: Decimal
    alternatives: List[Alternative] = field(default_factory=list)
    
    def to_dict(self) -> dict:
        return {
            "selected_card": {"card_id": self.selected_card.card_id, "name": self.selected_card.name},
            "projected_utilization": str(self.projected_utilization),
            "reasoning": list(self.reasoning),
            "alternatives": [alternative.to_dict() for alternative in self.alternatives],
        }
