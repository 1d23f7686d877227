"""Custom exception classes for CardSense."""


class CardSenseError(Exception):
    """Base exception for CardSense."""
    pass


class ConfigError(CardSenseError):
    """Configuration-related errors."""
    pass


class ExtractionError(CardSenseError):
    """Document could not be turned into text."""

    def __init__(self, file_name: str, reason: str):
        self.file_name = file_name
        self.reason = reason
        super().__init__(f"Failed to extract text from {file_name}: {reason}")


class ParseError(CardSenseError):
    """Statement text could not be parsed."""
    pass


class ZeroTransactionsError(ParseError):
    """A recognized bank template matched no transaction rows."""

    def __init__(self, institution: str, file_name: str = None):
        self.institution = institution
        self.file_name = file_name
        source = f" in {file_name}" if file_name else ""
        super().__init__(
            f"No {institution} transactions found{source}; "
            f"the statement layout may have changed"
        )


class EmptyMergeInputError(CardSenseError):
    """Statement merge called with no statements."""
    pass


class ValidationError(CardSenseError):
    """Data validation errors."""
    pass


class MissingRequiredInputError(ValidationError):
    """Recommendation requested without category or amount."""
    pass


class RecommendationError(CardSenseError):
    """Recommendation errors."""
    pass


class NoSafeCardError(RecommendationError):
    """No card can absorb the purchase under the utilization ceiling."""

    def __init__(self, amount, ceiling):
        self.amount = amount
        self.ceiling = ceiling
        super().__init__(
            f"No card can take a purchase of {amount} without crossing "
            f"{ceiling}% utilization"
        )
