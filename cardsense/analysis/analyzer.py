"""Card metrics from a (merged) statement."""
from datetime import date
from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP
from typing import Dict, List, Optional, Sequence

from cardsense.config.settings import AppSettings, get_settings
from cardsense.parser.categorizer import OTHERS, category_color
from cardsense.parser.models import ParsedStatement, Transaction
from cardsense.utils.events import EventSink, default_sink
from .models import CardAnalysis, CategorySpend, MonthlyData

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

ONE_DECIMAL = Decimal("0.1")
CENTS = Decimal("0.01")
HUNDRED = Decimal("100")

UNKNOWN_CARD_NAME = "Unknown Card"


class CardAnalyzer:
    """Computes utilization, health score, category mix and insights."""
    
    # Health score: (utilization above, penalty), checked in order
    UTILIZATION_PENALTIES = ((Decimal("80"), 30), (Decimal("60"), 20), (Decimal("40"), 10))
    LARGE_TICKET_MULTIPLIER = 3
    LARGE_TICKET_LIMIT = 5
    LARGE_TICKET_PENALTY = 10
    STEADY_USAGE_RANGE = (20, 100)
    STEADY_USAGE_BONUS = 5
    
    HIGH_UTILIZATION = Decimal("70")
    LOW_UTILIZATION = Decimal("30")
    ACTIVE_CARD_COUNT = 50
    LOW_USAGE_COUNT = 10
    
    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        events: Optional[EventSink] = None,
        today: Optional[date] = None
    ):
        self.settings = settings or get_settings()
        self.events = events or default_sink()
        self.today = today
    
    def analyze(self, statement: ParsedStatement, card_id: str) -> CardAnalysis:
        """
        Analyze one card.
        
        Args:
            statement: Parsed or merged statement
            card_id: Caller-assigned identifier
            
        Returns:
            CardAnalysis
        """
        transactions = statement.transactions
        total_spend = statement.total_spend
        
        limit = statement.credit_limit or self.settings.default_credit_limit
        utilization = total_spend / limit * HUNDRED
        current_utilization = utilization.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)
        
        category_spend = self.category_breakdown(statement)[:self.settings.top_categories]
        health_score = self.health_score(utilization, transactions)
        monthly_data = self.monthly_series(statement, current_utilization)
        periods = max(statement.period_count, 1)
        
        analysis = CardAnalysis(
            card_id=card_id,
            name=card_name(statement),
            limit=limit,
            current_utilization=current_utilization,
            last_month_spend=(total_spend / periods).quantize(CENTS, rounding=ROUND_HALF_UP),
            rewards_earned=self._rewards(total_spend),
            health_score=health_score,
            total_spend=total_spend,
            transaction_count=len(transactions),
            category_spend=category_spend,
            monthly_data=monthly_data,
            insights=self.insights(category_spend, utilization, transactions),
        )
        
        self.events.emit(
            "card_analyzed",
            card_id=card_id,
            utilization=current_utilization,
            health_score=health_score,
            limit_defaulted=statement.credit_limit is None
        )
        return analysis
    
    def category_breakdown(self, statement: ParsedStatement) -> List[CategorySpend]:
        """All categories, largest first; ties keep first-seen order."""
        total_spend = statement.total_spend
        totals: Dict[str, Decimal] = {}
        for txn in statement.transactions:
            category = txn.category or OTHERS
            totals[category] = totals.get(category, Decimal("0")) + txn.amount
        
        breakdown = [
            CategorySpend(
                category=category,
                amount=amount,
                percentage=(amount / total_spend * HUNDRED) if total_spend > 0 else Decimal("0"),
                color=category_color(category),
            )
            for category, amount in totals.items()
        ]
        # sorted() is stable
        return sorted(breakdown, key=lambda item: item.amount, reverse=True)
    
    def health_score(self, utilization: Decimal, transactions: Sequence[Transaction]) -> int:
        """Score 0-100 from utilization tier, large-ticket volatility and usage steadiness."""
        score = 100
        
        for threshold, penalty in self.UTILIZATION_PENALTIES:
            if utilization > threshold:
                score -= penalty
                break
        
        if transactions:
            mean = sum((txn.amount for txn in transactions), Decimal("0")) / len(transactions)
            large = sum(1 for txn in transactions if txn.amount > mean * self.LARGE_TICKET_MULTIPLIER)
            if large > self.LARGE_TICKET_LIMIT:
                score -= self.LARGE_TICKET_PENALTY
        
        low, high = self.STEADY_USAGE_RANGE
        if low < len(transactions) < high:
            score += self.STEADY_USAGE_BONUS
        
        return int(round(max(0, min(100, score))))
    
    def monthly_series(self, statement: ParsedStatement, utilization: Decimal) -> List[MonthlyData]:
        """
        Spread the total evenly over the statement's periods.
        
        Period boundaries are lost once statements are merged, so every
        period gets total / N. Labels count back from the current month and
        the series is returned oldest first.
        """
        periods = max(statement.period_count, 1)
        average = (statement.total_spend / periods).quantize(CENTS, rounding=ROUND_HALF_UP)
        current_month = (self.today or date.today()).month - 1
        
        series = []
        for offset in range(min(periods, self.settings.max_monthly_periods)):
            series.append(MonthlyData(
                month=MONTH_NAMES[(current_month - offset) % 12],
                spend=average,
                utilization=utilization,
                rewards=self._rewards(average),
            ))
        
        series.reverse()
        return series
    
    def insights(
        self,
        category_spend: Sequence[CategorySpend],
        utilization: Decimal,
        transactions: Sequence[Transaction]
    ) -> List[str]:
        """Narrative observations, most severe first."""
        insights = []
        shown = utilization.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)
        
        if utilization > self.HIGH_UTILIZATION:
            insights.append(f"High utilization at {shown}% - consider paying down balance")
        elif utilization < self.LOW_UTILIZATION:
            insights.append(f"Healthy utilization at {shown}% - plenty of credit buffer")
        
        if category_spend:
            top = category_spend[0]
            insights.append(f"Highest spending in {top.category} ({top.percentage:.1f}%)")
        
        count = len(transactions)
        if count > self.ACTIVE_CARD_COUNT:
            insights.append(f"Very active card with {count} transactions")
        elif count < self.LOW_USAGE_COUNT:
            insights.append(f"Low usage with {count} transactions")
        
        if count:
            average = sum((txn.amount for txn in transactions), Decimal("0")) / count
            if average > self.settings.high_value_threshold:
                insights.append(f"High-value transactions averaging {average:,.0f}")
        
        return insights[:self.settings.max_insights]
    
    def _rewards(self, spend: Decimal) -> int:
        return int((spend * self.settings.rewards_rate).to_integral_value(rounding=ROUND_FLOOR))


def card_name(statement: ParsedStatement) -> str:
    """Display name from the detected issuer."""
    if statement.institution_name:
        return f"{statement.institution_name} Credit Card"
    return UNKNOWN_CARD_NAME
