"""Data models for card analysis."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List


@dataclass(frozen=True)
class CategorySpend:
    """Spend in one category."""
    category: str
    amount: Decimal
    percentage: Decimal  # of total spend, unrounded
    color: str
    
    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "amount": str(self.amount),
            "percentage": str(round(self.percentage, 1)),
            "color": self.color,
        }


@dataclass(frozen=True)
class MonthlyData:
    """One synthetic period of the monthly series."""
    month: str
    spend: Decimal
    utilization: Decimal
    rewards: int
    
    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "spend": str(self.spend),
            "utilization": str(self.utilization),
            "rewards": self.rewards,
        }


@dataclass(frozen=True)
class CardAnalysis:
    """Decision-ready metrics for one card."""
    card_id: str
    name: str
    limit: Decimal
    current_utilization: Decimal  # percent, one decimal place
    last_month_spend: Decimal
    rewards_earned: int
    health_score: int
    total_spend: Decimal
    transaction_count: int
    annual_fee: Decimal = Decimal("0")
    category_spend: List[CategorySpend] = field(default_factory=list)
    monthly_data: List[MonthlyData] = field(default_factory=list)
    insights: List[str] = field(default_factory=list)
    
    def to_dict(self) -> dict:
        return {
            "id": self.card_id,
            "name": self.name,
            "limit": str(self.limit),
            "annual_fee": str(self.annual_fee),
            "current_utilization": str(self.current_utilization),
            "last_month_spend": str(self.last_month_spend),
            "rewards_earned": self.rewards_earned,
            "health_score": self.health_score,
            "total_spend": str(self.total_spend),
            "transaction_count": self.transaction_count,
            "category_spend": [item.to_dict() for item in self.category_spend],
            "monthly_data": [item.to_dict() for item in self.monthly_data],
            "insights": list(self.insights),
        }
