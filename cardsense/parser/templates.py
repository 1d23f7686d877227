"""Bank statement templates.

Each template is a plain record describing how one issuer lays out its
statement text: the markers that identify it, the per-line transaction
grammar and the patterns for account metadata. Templates without a
transaction grammar identify the issuer but parse with the generic rules.
"""
import re
from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple


SEP = r"[ \t]*[:\-]?[ \t]*"
CURRENCY = r"(?:Rs\.?|INR|₹)?[ \t]*"
AMOUNT = r"([\d,]+(?:\.\d{1,2})?)"
MONTHS = (
    r"(?:January|February|March|April|May|June|July|August|"
    r"September|October|November|December)"
)

UNKNOWN_KEY = "unknown"


def _compile(*patterns: str, flags: int = re.IGNORECASE) -> Tuple[re.Pattern, ...]:
    return tuple(re.compile(p, flags) for p in patterns)


def _row(pattern: str) -> re.Pattern:
    """Compile a whole-line transaction grammar.

    Fields are separated by spaces or tabs only, so a match stays on one line.
    """
    return re.compile(pattern, re.MULTILINE)


# Metadata patterns shared by every template, tried after template-specific ones
GENERIC_CREDIT_LIMIT = _compile(
    rf"(?<!available )(?<!cash )credit\s*limit{SEP}{CURRENCY}{AMOUNT}",
    rf"(?:card|total)\s*limit{SEP}{CURRENCY}{AMOUNT}",
)
GENERIC_MINIMUM_DUE = _compile(
    rf"(?:minimum\s*(?:amount\s*)?due|min\.?\s*(?:amt\.?\s*)?due|minimum\s*payment(?:\s*due)?)"
    rf"{SEP}{CURRENCY}{AMOUNT}",
)
GENERIC_CARD_NUMBER = _compile(
    r"(?:card|account)\s*(?:number|no\.?)?\s*[:\-]?\s*(?:\d{4,6}[\s-]?)?(?:[X*]{2,6}[\s-]?){1,4}(\d{4})\b",
    r"\b\d{6}[X*]{6}(\d{4})\b",
    r"(?:[X*]{4}[\s-]?){3}(\d{4})\b",
)
GENERIC_PREVIOUS_BALANCE = _compile(
    rf"(?:previous|opening|last\s+statement)\s+balance{SEP}{CURRENCY}{AMOUNT}",
)
GENERIC_STATEMENT_PERIOD = _compile(
    r"statement\s+period\s*[:\-]?\s*(.+?\s(?:to|-)\s.+?)\s*$",
    flags=re.IGNORECASE | re.MULTILINE,
)


@dataclass(frozen=True)
class BankTemplate:
    """Layout rules for one issuer."""
    key: str
    display_name: str
    markers: Tuple[re.Pattern, ...] = ()
    transaction_pattern: Optional[re.Pattern] = None
    credit_markers: FrozenSet[str] = frozenset({"CR"})
    credit_limit: Tuple[re.Pattern, ...] = ()
    minimum_due: Tuple[re.Pattern, ...] = ()
    card_number: Tuple[re.Pattern, ...] = ()
    previous_balance: Tuple[re.Pattern, ...] = ()
    statement_period: Tuple[re.Pattern, ...] = ()
    
    @property
    def has_grammar(self) -> bool:
        return self.transaction_pattern is not None
    
    @property
    def is_generic(self) -> bool:
        return self.key == UNKNOWN_KEY
    
    def matches(self, text: str) -> bool:
        return any(marker.search(text) for marker in self.markers)
    
    def is_credit_marker(self, marker: Optional[str]) -> bool:
        return bool(marker) and marker.strip().upper() in self.credit_markers
    
    def metadata_patterns(self, field_name: str) -> Tuple[re.Pattern, ...]:
        """Template-specific patterns for a field followed by the generic ones."""
        generic = {
            "credit_limit": GENERIC_CREDIT_LIMIT,
            "minimum_due": GENERIC_MINIMUM_DUE,
            "card_number": GENERIC_CARD_NUMBER,
            "previous_balance": GENERIC_PREVIOUS_BALANCE,
            "statement_period": GENERIC_STATEMENT_PERIOD,
        }[field_name]
        return getattr(self, field_name) + generic


HDFC = BankTemplate(
    key="hdfc",
    display_name="HDFC",
    markers=_compile(r"\bHDFC\b"),
    # 12/09/2025 [14:32:10] SWIGGY BANGALORE 450.00 [Cr]
    transaction_pattern=_row(
        r"^(?P<date>\d{2}/\d{2}/\d{4})(?:[ \t]+\d{2}:\d{2}(?::\d{2})?)?[ \t]+"
        r"(?P<description>[A-Za-z].*?)[ \t]+"
        r"(?P<amount>[\d,]+\.\d{2})(?:[ \t]+(?P<marker>Cr|CR|Dr|DR))?$"
    ),
    credit_limit=_compile(
        r"credit\s+limit\s+available\s+credit\s+limit[^\n]*\n\s*(?:Rs\.?|₹|C)?\s*([\d,]+(?:\.\d{2})?)",
    ),
    minimum_due=_compile(
        r"total\s+dues\s+minimum\s+amount\s+due[^\n]*\n\s*(?:\S+\s+)?[\d,]+\.\d{2}\s+([\d,]+\.\d{2})",
    ),
)

SBI = BankTemplate(
    key="sbi",
    display_name="SBI",
    markers=_compile(r"\bSBI\b", r"\bSBI\s*Card"),
    # 05 Sep 25 AMAZON PAY INDIA 1,200.00 D
    transaction_pattern=_row(
        r"^(?P<date>\d{2} [A-Z][a-z]{2} \d{2})[ \t]+"
        r"(?P<description>[A-Za-z].*?)[ \t]+"
        r"(?P<amount>[\d,]+\.\d{2})[ \t]*(?P<marker>[DC])$"
    ),
    credit_markers=frozenset({"C"}),
    credit_limit=_compile(
        rf"credit\s+limit\s*\(\s*(?:Rs\.?|₹)\s*\)\s*[:\-]?\s*{AMOUNT}",
    ),
)

ICICI = BankTemplate(
    key="icici",
    display_name="ICICI",
    markers=_compile(r"\bICICI\b"),
    # 05/09/2025 11223344556 SWIGGY BANGALORE IN 9 450.00 [CR]
    transaction_pattern=_row(
        r"^(?P<date>\d{2}/\d{2}/\d{4})[ \t]+\d{8,12}[ \t]+"
        r"(?P<description>[A-Za-z].*?)(?:[ \t]+-?\d+)?[ \t]+"
        r"(?P<amount>[\d,]+\.\d{2})(?:[ \t]+(?P<marker>CR|DR))?$"
    ),
)

AXIS = BankTemplate(
    key="axis",
    display_name="Axis",
    markers=_compile(r"\bAxis\s+Bank\b", r"\bAXIS\b"),
    # 05/09/2025 BIGBASKET BANGALORE 2,340.50 Dr
    transaction_pattern=_row(
        r"^(?P<date>\d{2}/\d{2}/\d{4})[ \t]+"
        r"(?P<description>[A-Za-z].*?)[ \t]+"
        r"(?P<amount>[\d,]+\.\d{2})[ \t]+(?P<marker>Dr|Cr|DR|CR)$"
    ),
)

KOTAK = BankTemplate(
    key="kotak",
    display_name="Kotak",
    markers=_compile(r"\bKotak\b"),
    # 05-Sep-2025 ZOMATO GURGAON 640.00 [Cr]
    transaction_pattern=_row(
        r"^(?P<date>\d{2}-[A-Za-z]{3}-\d{4})[ \t]+"
        r"(?P<description>[A-Za-z].*?)[ \t]+"
        r"(?P<amount>[\d,]+\.\d{2})(?:[ \t]+(?P<marker>Cr|CR|Dr|DR))?$"
    ),
)

CITI = BankTemplate(
    key="citi",
    display_name="Citi",
    markers=_compile(r"\bCiti(?:bank)?\b"),
)

AMEX = BankTemplate(
    key="amex",
    display_name="American Express",
    markers=_compile(r"\bAmerican\s+Express\b", r"\bAMEX\b"),
    # September 14 SWIGGY BANGALORE 450.00 [CR]
    transaction_pattern=_row(
        rf"^(?P<date>{MONTHS}[ \t]+\d{{1,2}})[ \t]+"
        r"(?P<description>[A-Za-z].*?)[ \t]+"
        r"(?P<amount>[\d,]+\.\d{2})(?:[ \t]+(?P<marker>CR))?$"
    ),
    card_number=_compile(r"X{4}[\s-]?X{6}[\s-]?X(\d{4})\b"),
)

INDUSIND = BankTemplate(
    key="indusind",
    display_name="IndusInd",
    markers=_compile(r"\bIndusInd\b"),
)

YES_BANK = BankTemplate(
    key="yes_bank",
    display_name="Yes Bank",
    markers=_compile(r"\bYes\s+Bank\b"),
)

STANDARD_CHARTERED = BankTemplate(
    key="standard_chartered",
    display_name="Standard Chartered",
    markers=_compile(r"\bStandard\s+Chartered\b"),
)

GENERIC_TEMPLATE = BankTemplate(
    key=UNKNOWN_KEY,
    display_name="Unknown",
    credit_markers=frozenset({"CR"}),
)

# Detection order; the first template whose marker appears wins
BANK_TEMPLATES: Tuple[BankTemplate, ...] = (
    HDFC,
    SBI,
    ICICI,
    AXIS,
    KOTAK,
    CITI,
    AMEX,
    INDUSIND,
    YES_BANK,
    STANDARD_CHARTERED,
)


def get_template(key: str) -> BankTemplate:
    """Look up a template by key, falling back to the generic entry."""
    for template in BANK_TEMPLATES:
        if template.key == key:
            return template
    return GENERIC_TEMPLATE
