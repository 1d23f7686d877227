"""Purchase routing across analyzed cards."""
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Sequence, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from cardsense.analysis.models import CardAnalysis
from cardsense.config.settings import AppSettings, get_settings
from cardsense.utils.events import EventSink, default_sink
from cardsense.utils.exceptions import MissingRequiredInputError, NoSafeCardError
from .models import Alternative, Priority, Recommendation, RecommendationRequest

HUNDRED = Decimal("100")
ONE_DECIMAL = Decimal("0.1")

# Balance mode weights: category fit, then headroom, then track record
CATEGORY_WEIGHT = Decimal("0.4")
HEADROOM_WEIGHT = Decimal("0.3")
HEALTH_WEIGHT = Decimal("0.3")


class RecommendationEngine:
    """Selects the card to use for a purchase."""
    
    def __init__(self, settings: Optional[AppSettings] = None, events: Optional[EventSink] = None):
        self.settings = settings or get_settings()
        self.events = events or default_sink()
    
    def recommend(
        self,
        category: Optional[str],
        amount: Union[Decimal, str, None],
        cards: Sequence[CardAnalysis],
        priority: str = Priority.BALANCE.value
    ) -> Recommendation:
        """
        Recommend a card for a purchase.
        
        Args:
            category: Purchase category, matched against card category names
            amount: Purchase amount, as a Decimal or numeric string
            cards: Analyzed cards to choose from
            priority: "rewards", "safety" or "balance"
            
        Returns:
            Recommendation with the runner-up as the only alternative
            
        Raises:
            MissingRequiredInputError: If category or amount is missing or invalid
            NoSafeCardError: If every card would cross the utilization ceiling
        """
        request = self.validate_request(category, amount, priority)
        
        eligible = [card for card in cards if self.projected_utilization(card, request.amount) < self.ceiling]
        if not eligible:
            self.events.emit("no_safe_card", amount=request.amount, cards=len(cards))
            raise NoSafeCardError(request.amount, self.ceiling)
        
        ranked = self.rank(eligible, request)
        best = ranked[0]
        projected = self.projected_utilization(best, request.amount)
        
        alternatives = []
        if len(ranked) > 1:
            alternatives.append(Alternative(ranked[1], self._alternative_reason(ranked[1], request)))
        
        recommendation = Recommendation(
            selected_card=best,
            reasoning=self._reasoning(best, request, projected),
            projected_utilization=projected.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP),
            alternatives=alternatives,
        )
        
        self.events.emit(
            "recommendation_made",
            card_id=best.card_id,
            priority=request.priority.value,
            eligible=len(eligible),
            considered=len(cards)
        )
        return recommendation
    
    @property
    def ceiling(self) -> Decimal:
        return self.settings.utilization_ceiling
    
    @staticmethod
    def validate_request(
        category: Optional[str],
        amount: Union[Decimal, str, None],
        priority: str
    ) -> RecommendationRequest:
        """Validate inputs before any computation."""
        if category is None or amount is None or amount == "":
            raise MissingRequiredInputError("Category and amount are required for a recommendation")
        
        try:
            return RecommendationRequest(category=category, amount=amount, priority=priority)
        except PydanticValidationError as e:
            raise MissingRequiredInputError(f"Invalid recommendation request: {e}")
    
    @staticmethod
    def projected_utilization(card: CardAnalysis, amount: Decimal) -> Decimal:
        """Utilization percent after adding the purchase to the current balance."""
        balance = card.current_utilization / HUNDRED * card.limit
        return (balance + amount) / card.limit * HUNDRED
    
    def rank(self, cards: Sequence[CardAnalysis], request: RecommendationRequest) -> List[CardAnalysis]:
        """Order cards best first for the request's priority; ties keep input order."""
        if request.priority is Priority.REWARDS:
            return sorted(cards, key=lambda card: category_match(card, request.category)[0], reverse=True)
        
        if request.priority is Priority.SAFETY:
            return sorted(cards, key=lambda card: card.current_utilization)
        
        return sorted(cards, key=lambda card: balance_score(card, request.category), reverse=True)
    
    def _reasoning(self, card: CardAnalysis, request: RecommendationRequest, projected: Decimal) -> List[str]:
        projected_text = projected.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)
        spend, percentage = category_match(card, request.category)
        
        if request.priority is Priority.REWARDS:
            reasons = [
                f"Highest past {request.category} spend on this card ({spend:,.0f})",
                f"Estimated {self._rewards(request.amount)} reward points on this purchase",
            ]
        elif request.priority is Priority.SAFETY:
            reasons = [
                f"Lowest current utilization at {card.current_utilization}%",
                f"Health score of {card.health_score}/100",
            ]
        else:
            score = balance_score(card, request.category).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)
            reasons = [
                f"Best balanced score of {score} across category fit, credit headroom and health",
                f"{request.category} is {percentage:.1f}% of this card's spend",
                f"Health score of {card.health_score}/100",
            ]
        
        reasons.append(f"Utilization after purchase: {projected_text}%")
        return reasons
    
    def _alternative_reason(self, card: CardAnalysis, request: RecommendationRequest) -> str:
        if request.priority is Priority.REWARDS:
            spend, _ = category_match(card, request.category)
            return f"Next highest {request.category} spend ({spend:,.0f})"
        if request.priority is Priority.SAFETY:
            return f"Next lowest utilization at {card.current_utilization}%"
        score = balance_score(card, request.category).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)
        return f"Runner-up with a balanced score of {score}"
    
    def _rewards(self, amount: Decimal) -> int:
        return int(amount * self.settings.rewards_rate)


def category_match(card: CardAnalysis, category: str) -> Tuple[Decimal, Decimal]:
    """Spend and percentage of the first card category whose name contains the target."""
    target = category.lower()
    for item in card.category_spend:
        if target in item.category.lower():
            return item.amount, item.percentage
    return Decimal("0"), Decimal("0")


def balance_score(card: CardAnalysis, category: str) -> Decimal:
    _, percentage = category_match(card, category)
    return (
        CATEGORY_WEIGHT * percentage
        + HEADROOM_WEIGHT * (HUNDRED - card.current_utilization)
        + HEALTH_WEIGHT * card.health_score
    )
