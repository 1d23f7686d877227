"""Statement parsing module."""
from .models import Direction, Transaction, ParsedStatement
from .templates import BankTemplate, BANK_TEMPLATES, GENERIC_TEMPLATE, get_template
from .detector import BankDetector
from .categorizer import categorize, CATEGORIES
from .statement_parser import StatementParser, StatementMetadata, parse_amount

__all__ = [
    "Direction",
    "Transaction",
    "ParsedStatement",
    "BankTemplate",
    "BANK_TEMPLATES",
    "GENERIC_TEMPLATE",
    "get_template",
    "BankDetector",
    "categorize",
    "CATEGORIES",
    "StatementParser",
    "StatementMetadata",
    "parse_amount"
]
