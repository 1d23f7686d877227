"""Data models for parsed statements."""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Optional


UNKNOWN_CARD_DIGITS = "****"
DEFAULT_PERIOD_LABEL = "Last Month"


class Direction(str, Enum):
    """Money movement on the card account."""
    DEBIT = "debit"
    CREDIT = "credit"


@dataclass(frozen=True)
class Transaction:
    """A single spend row from a statement."""
    date: str  # as printed on the statement, not normalized
    description: str
    amount: Decimal
    category: str
    direction: Direction = Direction.DEBIT
    
    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "description": self.description,
            "amount": str(self.amount),
            "direction": self.direction.value,
            "category": self.category,
        }


@dataclass
class ParsedStatement:
    """Transactions and account metadata from one or more statement documents."""
    institution_name: Optional[str]
    card_last_four: str = UNKNOWN_CARD_DIGITS
    statement_period: str = DEFAULT_PERIOD_LABEL
    transactions: List[Transaction] = field(default_factory=list)
    credit_limit: Optional[Decimal] = None
    minimum_due: Optional[Decimal] = None
    previous_balance: Optional[Decimal] = None
    period_count: int = 1
    
    @property
    def total_spend(self) -> Decimal:
        """Sum of transaction amounts; always recomputed."""
        return sum((txn.amount for txn in self.transactions), Decimal("0"))
    
    def to_dict(self) -> dict:
        return {
            "institution_name": self.institution_name,
            "card_last_four": self.card_last_four,
            "statement_period": self.statement_period,
            "transactions": [txn.to_dict() for txn in self.transactions],
            "total_spend": str(self.total_spend),
            "credit_limit": _optional_str(self.credit_limit),
            "minimum_due": _optional_str(self.minimum_due),
            "previous_balance": _optional_str(self.previous_balance),
            "period_count": self.period_count,
        }


def _optional_str(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else str(value)
