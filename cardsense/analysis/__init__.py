"""Card analysis module."""
from .models import CategorySpend, MonthlyData, CardAnalysis
from .merger import StatementMerger, merge_statements
from .analyzer import CardAnalyzer, card_name

__all__ = [
    "CategorySpend",
    "MonthlyData",
    "CardAnalysis",
    "StatementMerger",
    "merge_statements",
    "CardAnalyzer",
    "card_name"
]
