"""Keyword-based transaction categorization."""
import re
from typing import Dict, List, Tuple


DINING = "Dining"
GROCERIES = "Groceries"
PHARMACY = "Pharmacy"
MEDICAL = "Medical"
FUEL = "Fuel"
TRAVEL = "Travel"
ENTERTAINMENT = "Entertainment"
SHOPPING = "Shopping"
BILLS = "Bills"
OTHERS = "Others"

# Checked top to bottom; the first category with a matching keyword wins.
# Specific merchants sit above the generic words they contain
# (e.g. "amazon fresh" before "amazon", "uber eats" before "uber").
CATEGORY_RULES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    (DINING, (
        "swiggy", "zomato", "uber eats", "dominos", "domino's", "mcdonald",
        "starbucks", "kfc", "pizza", "restaurant", "cafe", "dineout",
        "eatsure", "food",
    )),
    (GROCERIES, (
        "bigbasket", "grofers", "blinkit", "zepto", "dmart", "reliance fresh",
        "amazon fresh", "jiomart", "nature's basket", "grocery", "supermarket",
    )),
    (PHARMACY, (
        "pharmacy", "pharmeasy", "netmeds", "1mg", "medplus", "chemist",
    )),
    (MEDICAL, (
        "hospital", "clinic", "diagnostic", "apollo", "healthcare", "medical",
        "dental",
    )),
    (FUEL, (
        "petrol", "fuel", "hpcl", "bpcl", "indian oil", "iocl", "shell",
        "filling station",
    )),
    (TRAVEL, (
        "uber", "ola cabs", "olacabs", "rapido", "irctc", "makemytrip",
        "goibibo", "cleartrip", "yatra", "airline", "airways", "indigo",
        "vistara", "air india", "hotel", "booking", "flight", "oyo rooms",
    )),
    (ENTERTAINMENT, (
        "bookmyshow", "netflix", "spotify", "hotstar", "prime video", "pvr",
        "inox", "cinema", "movie", "youtube", "gaming",
    )),
    (SHOPPING, (
        "amazon", "flipkart", "myntra", "ajio", "nykaa", "meesho", "tata cliq",
        "croma", "shop", "store", "mall",
    )),
    (BILLS, (
        "electricity", "water", "gas", "broadband", "mobile", "recharge",
        "airtel", "jio", "vodafone", "bsnl", "tata power", "bescom", "dth",
        "insurance", "paytm", "phonepe",
    )),
)

# Short keywords that also occur inside unrelated words ("las vegas", "waterstones")
WHOLE_WORD_KEYWORDS = frozenset({"gas", "water", "dth", "mall", "shell"})

CATEGORIES: List[str] = [category for category, _ in CATEGORY_RULES] + [OTHERS]

CATEGORY_COLORS: Dict[str, str] = {
    DINING: "#4F46E5",
    SHOPPING: "#7C3AED",
    TRAVEL: "#EC4899",
    GROCERIES: "#F59E0B",
    BILLS: "#10B981",
    PHARMACY: "#14B8A6",
    MEDICAL: "#EF4444",
    ENTERTAINMENT: "#3B82F6",
    FUEL: "#F97316",
    OTHERS: "#6B7280",
}


def categorize(description: str) -> str:
    """
    Map a transaction description to a spending category.
    
    Args:
        description: Free-text description from the statement
        
    Returns:
        Category name; "Others" when no rule matches
    """
    desc = (description or "").lower()
    for category, keywords in CATEGORY_RULES:
        if any(_keyword_matches(keyword, desc) for keyword in keywords):
            return category
    return OTHERS


def _keyword_matches(keyword: str, desc: str) -> bool:
    if keyword in WHOLE_WORD_KEYWORDS:
        return re.search(rf"\b{re.escape(keyword)}\b", desc) is not None
    return keyword in desc


def category_color(category: str) -> str:
    """Display color for a category."""
    return CATEGORY_COLORS.get(category, CATEGORY_COLORS[OTHERS])
