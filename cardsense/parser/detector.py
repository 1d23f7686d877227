"""Issuer detection from statement text."""
from typing import Optional, Sequence

from cardsense.utils.events import EventSink, default_sink
from .templates import BANK_TEMPLATES, GENERIC_TEMPLATE, BankTemplate


class BankDetector:
    """Picks the statement template by scanning for issuer markers in order."""
    
    def __init__(
        self,
        templates: Sequence[BankTemplate] = BANK_TEMPLATES,
        events: Optional[EventSink] = None
    ):
        self.templates = tuple(templates)
        self.events = events or default_sink()
    
    def detect(self, text: str) -> BankTemplate:
        """
        Detect the issuing bank.
        
        Args:
            text: Statement text
            
        Returns:
            Matching template, or the generic template when no marker is found
        """
        if text:
            for template in self.templates:
                if template.matches(text):
                    self.events.emit(
                        "bank_detected",
                        bank=template.key,
                        has_grammar=template.has_grammar
                    )
                    return template
        
        self.events.emit("bank_not_detected", text_length=len(text or ""))
        return GENERIC_TEMPLATE
    
    def detect_key(self, text: str) -> str:
        """Detect the issuer identifier ("unknown" when nothing matches)."""
        return self.detect(text).key
