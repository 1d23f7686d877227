"""Utility modules."""
from .logger import get_logger, configure_logging, set_document_context
from .exceptions import (
    CardSenseError,
    ConfigError,
    ExtractionError,
    ParseError,
    ZeroTransactionsError,
    EmptyMergeInputError,
    ValidationError,
    MissingRequiredInputError,
    RecommendationError,
    NoSafeCardError
)
from .events import EventSink, NullEventSink, LoggingEventSink, RecordingEventSink

__all__ = [
    "get_logger",
    "configure_logging",
    "set_document_context",
    "CardSenseError",
    "ConfigError",
    "ExtractionError",
    "ParseError",
    "ZeroTransactionsError",
    "EmptyMergeInputError",
    "ValidationError",
    "MissingRequiredInputError",
    "RecommendationError",
    "NoSafeCardError",
    "EventSink",
    "NullEventSink",
    "LoggingEventSink",
    "RecordingEventSink"
]
