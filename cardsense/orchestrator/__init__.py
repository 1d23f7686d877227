"""Orchestration module."""
from .processor import StatementProcessor, BatchResult, DocumentFailure

__all__ = ["StatementProcessor", "BatchResult", "DocumentFailure"]
