"""PDF processing module."""
from .processor import PDFProcessor
from .normalizer import TextNormalizer

__all__ = ["PDFProcessor", "TextNormalizer"]
