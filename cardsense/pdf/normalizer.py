"""Text cleanup for PDF extractions."""
import re
import unicodedata


class TextNormalizer:
    """Normalizes statement text without reordering or dropping rows."""
    
    # Page furniture emitted between transaction rows
    ARTIFACTS = [
        r"^\s*Page\s+\d+(?:\s+of\s+\d+)?\s*$",
        r"^\s*Page\s+\d+\s*/\s*\d+\s*$",
    ]
    
    def normalize(self, text: str) -> str:
        """
        Normalize statement text.
        
        Args:
            text: Raw extracted text
            
        Returns:
            Normalized text
        """
        if not text:
            return ""
        
        text = unicodedata.normalize("NFC", text)
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        text = text.replace("\u00a0", " ")
        
        text = self.strip_artifacts(text)
        return self._clean_whitespace(text)
    
    def strip_artifacts(self, text: str) -> str:
        """Remove page markers."""
        for pattern in self.ARTIFACTS:
            text = re.sub(pattern, "", text, flags=re.MULTILINE | re.IGNORECASE)
        return text
    
    def _clean_whitespace(self, text: str) -> str:
        """
        Clean up excessive whitespace.
        
        Args:
            text: Text with whitespace issues
            
        Returns:
            Cleaned text
        """
        # Tabs and runs of spaces become a single space
        text = re.sub(r"[ \t\f\v]+", " ", text)
        
        # Strip leading/trailing whitespace from lines
        text = "\n".join(line.strip() for line in text.split("\n"))
        
        # Replace multiple newlines with double newline
        text = re.sub(r"\n{3,}", "\n\n", text)
        
        return text.strip()
