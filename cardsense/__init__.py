"""CardSense: credit card statement parsing, analysis and card recommendations."""

__version__ = "1.0.0"
