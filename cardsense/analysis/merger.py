"""Combining several statements of one card."""
from typing import Optional, Sequence

from cardsense.parser.models import UNKNOWN_CARD_DIGITS, ParsedStatement
from cardsense.utils.events import EventSink, default_sink
from cardsense.utils.exceptions import EmptyMergeInputError


class StatementMerger:
    """Concatenates statements of the same card into one observation window."""
    
    def __init__(self, events: Optional[EventSink] = None):
        self.events = events or default_sink()
    
    def merge(self, statements: Sequence[ParsedStatement]) -> ParsedStatement:
        """
        Merge statements in the order given.
        
        Transactions are concatenated without de-duplication. The credit
        limit is the largest one seen, since a partially extracted page can
        miss or understate it.
        
        Args:
            statements: Parsed statements of one physical card
            
        Returns:
            Merged statement; the sole input itself when only one is given
            
        Raises:
            EmptyMergeInputError: If no statements are supplied
        """
        if not statements:
            raise EmptyMergeInputError("No statements to merge")
        
        if len(statements) == 1:
            return statements[0]
        
        first = statements[0]
        period_count = sum(statement.period_count for statement in statements)
        
        merged = ParsedStatement(
            institution_name=first.institution_name,
            card_last_four=self._card_last_four(statements),
            statement_period=f"{period_count} months",
            transactions=[],
            credit_limit=None,
            minimum_due=first.minimum_due,
            previous_balance=first.previous_balance,
            period_count=period_count,
        )
        
        for statement in statements:
            merged.transactions.extend(statement.transactions)
            if statement.credit_limit is not None and (
                merged.credit_limit is None or statement.credit_limit > merged.credit_limit
            ):
                merged.credit_limit = statement.credit_limit
        
        self.events.emit(
            "statements_merged",
            statements=len(statements),
            transactions=len(merged.transactions),
            credit_limit=merged.credit_limit
        )
        return merged
    
    @staticmethod
    def _card_last_four(statements: Sequence[ParsedStatement]) -> str:
        for statement in statements:
            if statement.card_last_four != UNKNOWN_CARD_DIGITS:
                return statement.card_last_four
        return UNKNOWN_CARD_DIGITS


def merge_statements(statements: Sequence[ParsedStatement], events: Optional[EventSink] = None) -> ParsedStatement:
    """Module-level shortcut for StatementMerger().merge()."""
    return StatementMerger(events).merge(statements)
