"""Statement text to transaction ledger."""
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Sequence

from cardsense.config.settings import AppSettings, get_settings
from cardsense.utils.events import EventSink, default_sink
from cardsense.utils.exceptions import ZeroTransactionsError
from .categorizer import categorize
from .detector import BankDetector
from .models import (
    DEFAULT_PERIOD_LABEL,
    UNKNOWN_CARD_DIGITS,
    Direction,
    ParsedStatement,
    Transaction,
)
from .templates import BankTemplate


# Rows describing money coming back to the card rather than spend
EXCLUSION_MARKERS = (
    "payment",
    "reversal",
    "reversed",
    "refund",
    "cashback",
    "cash back",
    "autopay",
    "auto debit",
)

# Fallback grammar: any recognizable date on the line
DATE_PATTERNS = [
    re.compile(r"\b(\d{2}[/\-]\d{2}[/\-]\d{4})\b"),
    re.compile(r"\b(\d{2}-[A-Za-z]{3}-\d{4})\b"),
    re.compile(r"\b(\d{2}\s+[A-Za-z]{3}\s+\d{4})\b"),
    re.compile(r"\b(\d{2}\s+[A-Za-z]+\s+\d{4})\b"),
    re.compile(r"\b(\d{4}[/\-]\d{2}[/\-]\d{2})\b"),
]

# Fallback grammar: currency-tagged amount first, then any two-decimal amount
AMOUNT_PATTERNS = [
    re.compile(
        r"(?P<sign>\+)?(?:Rs\.?|INR|₹)\s*(?P<amount>\d[\d,]*(?:\.\d{1,2})?)"
        r"(?:\s*(?P<marker>Dr|Cr|DR|CR)\b)?"
    ),
    re.compile(
        r"(?P<sign>\+)?(?<![\d,.])(?P<amount>\d[\d,]*\.\d{2})(?!\d)"
        r"(?:\s*(?P<marker>Dr|Cr|DR|CR)\b)?"
    ),
]

HAS_LETTER = re.compile(r"[A-Za-z]")
CURRENCY_MARKERS = re.compile(r"Rs\.?|INR|₹", re.IGNORECASE)


def parse_amount(text: Optional[str]) -> Optional[Decimal]:
    """
    Convert '1,23,456.78' or 'Rs. 450' into a Decimal.
    
    Thousands separators and currency markers are stripped. Returns None
    when nothing numeric is left.
    """
    if not text:
        return None
    
    cleaned = CURRENCY_MARKERS.sub("", text.replace(",", ""))
    cleaned = re.sub(r"[^0-9.]", "", cleaned)
    if not cleaned:
        return None
    
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


def is_excluded(description: str) -> bool:
    """True for payment, reversal and cashback rows."""
    desc = description.lower()
    return any(marker in desc for marker in EXCLUSION_MARKERS)


@dataclass
class StatementMetadata:
    """Account details scanned outside the transaction rows."""
    card_last_four: str = UNKNOWN_CARD_DIGITS
    credit_limit: Optional[Decimal] = None
    minimum_due: Optional[Decimal] = None
    previous_balance: Optional[Decimal] = None
    statement_period: str = DEFAULT_PERIOD_LABEL


class StatementParser:
    """Turns normalized statement text into a ParsedStatement."""
    
    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        detector: Optional[BankDetector] = None,
        events: Optional[EventSink] = None
    ):
        self.settings = settings or get_settings()
        self.events = events or default_sink()
        self.detector = detector or BankDetector(events=self.events)
    
    def parse(
        self,
        text: str,
        template: Optional[BankTemplate] = None,
        file_name: Optional[str] = None
    ) -> ParsedStatement:
        """
        Parse one statement document.
        
        Args:
            text: Normalized statement text
            template: Issuer template; detected from the text when omitted
            file_name: Source document, used in errors and events
            
        Returns:
            ParsedStatement with debit transactions in source order
            
        Raises:
            ZeroTransactionsError: A bank-specific grammar matched no rows
        """
        if template is None:
            template = self.detector.detect(text)
        
        transactions = self.parse_transactions(text, template)
        
        if template.has_grammar and not transactions:
            self.events.emit("transactions_parsed", bank=template.key, count=0, file=file_name)
            raise ZeroTransactionsError(template.display_name, file_name)
        
        metadata = self.extract_metadata(text, template)
        
        statement = ParsedStatement(
            institution_name=None if template.is_generic else template.display_name,
            card_last_four=metadata.card_last_four,
            statement_period=metadata.statement_period,
            transactions=transactions,
            credit_limit=metadata.credit_limit,
            minimum_due=metadata.minimum_due,
            previous_balance=metadata.previous_balance,
        )
        
        self.events.emit(
            "transactions_parsed",
            bank=template.key,
            count=len(transactions),
            total=statement.total_spend,
            file=file_name
        )
        return statement
    
    def parse_transactions(self, text: str, template: BankTemplate) -> List[Transaction]:
        """Match transaction rows with the template grammar, or the generic one."""
        if template.has_grammar:
            return self._parse_with_grammar(text, template)
        return self._parse_generic(text, template)
    
    def _parse_with_grammar(self, text: str, template: BankTemplate) -> List[Transaction]:
        transactions = []
        
        for match in template.transaction_pattern.finditer(text):
            if template.is_credit_marker(match.group("marker")):
                self.events.emit("transaction_excluded", reason="credit", line=match.group(0))
                continue
            
            transaction = self._build_transaction(
                match.group("date"),
                match.group("description"),
                match.group("amount"),
                line=match.group(0)
            )
            if transaction:
                transactions.append(transaction)
        
        return transactions
    
    def _parse_generic(self, text: str, template: BankTemplate) -> List[Transaction]:
        transactions = []
        
        for raw_line in text.split("\n"):
            line = raw_line.strip()
            if len(line) < self.settings.min_line_length:
                continue
            
            date_match = _first_match(DATE_PATTERNS, line)
            if not date_match:
                continue
            
            remainder = line[:date_match.start()] + " " + line[date_match.end():]
            amount_match = _first_match(AMOUNT_PATTERNS, remainder)
            if not amount_match:
                continue
            
            if amount_match.group("sign") or template.is_credit_marker(amount_match.group("marker")):
                self.events.emit("transaction_excluded", reason="credit", line=line)
                continue
            
            description = remainder[:amount_match.start()] + " " + remainder[amount_match.end():]
            transaction = self._build_transaction(
                date_match.group(1),
                description,
                amount_match.group("amount"),
                line=line
            )
            if transaction:
                transactions.append(transaction)
        
        return transactions
    
    def _build_transaction(
        self,
        date: str,
        description: str,
        amount_text: str,
        line: str
    ) -> Optional[Transaction]:
        """Apply the shared row filters and build a debit transaction."""
        description = " ".join(description.split()).strip(" -|:")
        
        if is_excluded(description):
            self.events.emit("transaction_excluded", reason="payment_or_reversal", line=line)
            return None
        
        description = description[:self.settings.description_max_length].rstrip()
        if len(description) < self.settings.min_description_length or not HAS_LETTER.search(description):
            self.events.emit("transaction_excluded", reason="description", line=line)
            return None
        
        amount = parse_amount(amount_text)
        if amount is None or amount <= 0:
            self.events.emit("transaction_excluded", reason="amount", line=line)
            return None
        
        return Transaction(
            date=date.strip(),
            description=description,
            amount=amount,
            category=categorize(description),
            direction=Direction.DEBIT
        )
    
    def extract_metadata(self, text: str, template: BankTemplate) -> StatementMetadata:
        """Scan for card digits, limit, minimum due, balance and period."""
        metadata = StatementMetadata()
        
        card_digits = _first_group(template.metadata_patterns("card_number"), text)
        if card_digits:
            metadata.card_last_four = card_digits
        
        metadata.credit_limit = self._bounded_amount(
            "credit_limit",
            template,
            text,
            self.settings.credit_limit_min,
            self.settings.credit_limit_max
        )
        metadata.minimum_due = self._bounded_amount(
            "minimum_due",
            template,
            text,
            Decimal("0"),
            self.settings.credit_limit_max
        )
        
        balance = _first_group(template.metadata_patterns("previous_balance"), text)
        metadata.previous_balance = parse_amount(balance)
        
        period = _first_group(template.metadata_patterns("statement_period"), text)
        if period:
            metadata.statement_period = period
        
        self.events.emit(
            "metadata_extracted",
            bank=template.key,
            card_last_four=metadata.card_last_four,
            credit_limit=metadata.credit_limit,
            minimum_due=metadata.minimum_due
        )
        return metadata
    
    def _bounded_amount(
        self,
        field_name: str,
        template: BankTemplate,
        text: str,
        lower: Decimal,
        upper: Decimal
    ) -> Optional[Decimal]:
        """First positive pattern hit within [lower, upper]; out-of-range hits are skipped."""
        for pattern in template.metadata_patterns(field_name):
            for match in pattern.finditer(text):
                value = parse_amount(match.group(1))
                if value is None:
                    continue
                in_range = value > 0 and value >= lower and value <= upper
                if in_range:
                    return value
                self.events.emit("metadata_rejected", field=field_name, value=value)
        return None


def _first_match(patterns: Sequence[re.Pattern], text: str):
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match
    return None


def _first_group(patterns: Sequence[re.Pattern], text: str) -> Optional[str]:
    match = _first_match(patterns, text)
    return match.group(1).strip() if match else None
