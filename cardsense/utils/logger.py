"""Logging infrastructure with document context."""
import logging
import sys
import threading
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional


class DocumentContextFilter(logging.Filter):
    """Add the document being processed to log records."""
    
    def __init__(self):
        super().__init__()
        self._local = threading.local()
    
    @property
    def document(self) -> Optional[str]:
        return getattr(self._local, "document", None)
    
    @document.setter
    def document(self, value: Optional[str]):
        self._local.document = value
    
    def filter(self, record):
        """Add document to record."""
        record.document = self.document or "system"
        return True


class CardSenseLogger:
    """Centralized logging manager."""
    
    def __init__(
        self,
        log_level: str = "INFO",
        log_dir: Optional[Path] = None,
        max_file_size_mb: int = 10,
        backup_count: int = 5
    ):
        self.document_filter = DocumentContextFilter()
        
        self.logger = logging.getLogger("cardsense")
        self.logger.setLevel(getattr(logging, log_level.upper()))
        self.logger.propagate = False
        
        # Remove existing handlers
        self.logger.handlers.clear()
        
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] [document:%(document)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(getattr(logging, log_level.upper()))
        console_handler.setFormatter(formatter)
        console_handler.addFilter(self.document_filter)
        self.logger.addHandler(console_handler)
        
        self.log_file = None
        if log_dir:
            log_dir = Path(log_dir).expanduser()
            log_dir.mkdir(parents=True, exist_ok=True)
            self.log_file = log_dir / "cardsense.log"
            
            file_handler = RotatingFileHandler(
                self.log_file,
                maxBytes=max_file_size_mb * 1024 * 1024,
                backupCount=backup_count,
                encoding="utf-8"
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            file_handler.addFilter(self.document_filter)
            self.logger.addHandler(file_handler)
    
    def set_document_context(self, document: Optional[str]):
        """Set current document context for logging on this thread."""
        self.document_filter.document = document
    
    def get_logger(self) -> logging.Logger:
        """Get the configured logger."""
        return self.logger


# Global logger instance
_logger_instance: Optional[CardSenseLogger] = None


def get_logger(log_level: str = "INFO") -> logging.Logger:
    """Get or create global logger instance."""
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = CardSenseLogger(log_level)
    return _logger_instance.get_logger()


def configure_logging(
    log_level: str = "INFO",
    log_dir: Optional[Path] = None,
    max_file_size_mb: int = 10,
    backup_count: int = 5
) -> logging.Logger:
    """Replace the global logger configuration."""
    global _logger_instance
    _logger_instance = CardSenseLogger(log_level, log_dir, max_file_size_mb, backup_count)
    return _logger_instance.get_logger()


def set_document_context(document: Optional[str]):
    """Set document context for logging."""
    global _logger_instance
    if _logger_instance:
        _logger_instance.set_document_context(document)
