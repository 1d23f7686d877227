"""Tests for statement text normalizer."""
import unittest

from cardsense.pdf.normalizer import TextNormalizer


class TestTextNormalizer(unittest.TestCase):
    """Test TextNormalizer functionality."""
    
    def setUp(self):
        """Set up test fixtures."""
        self.normalizer = TextNormalizer()
    
    def test_normalize_basic(self):
        """Test space collapsing and line trimming."""
        text = "  SWIGGY    BANGALORE\t\t450.00  "
        self.assertEqual(self.normalizer.normalize(text), "SWIGGY BANGALORE 450.00")
    
    def test_line_endings_and_nbsp(self):
        text = "Credit\u00a0Limit: 50,000\r\nMinimum Due: 500\rEnd"
        self.assertEqual(
            self.normalizer.normalize(text),
            "Credit Limit: 50,000\nMinimum Due: 500\nEnd"
        )
    
    def test_strip_artifacts(self):
        """Test page marker removal."""
        text = "02/09/2025 SWIGGY 450.00\nPage 1 of 3\n04/09/2025 AMAZON 1,200.00\nPage 2/3"
        result = self.normalizer.strip_artifacts(text)
        
        self.assertNotIn("Page", result)
        self.assertIn("02/09/2025 SWIGGY 450.00", result)
        self.assertIn("04/09/2025 AMAZON 1,200.00", result)
    
    def test_page_word_inside_row_kept(self):
        text = "05/09/2025 PAGE 3 BOOKSTORE 450.00"
        self.assertEqual(self.normalizer.normalize(text), text)
    
    def test_clean_whitespace(self):
        """Test whitespace cleaning."""
        text = "line1\n\n\n\nline2"
        result = self.normalizer._clean_whitespace(text)
        
        # Should reduce multiple newlines
        self.assertNotIn("\n\n\n", result)
        self.assertEqual(result, "line1\n\nline2")
    
    def test_row_order_preserved(self):
        rows = [f"0{day}/09/2025 MERCHANT {day} 100.00" for day in range(1, 8)]
        self.assertEqual(self.normalizer.normalize("\n".join(rows)).split("\n"), rows)
    
    def test_empty(self):
        self.assertEqual(self.normalizer.normalize(""), "")
        self.assertEqual(self.normalizer.normalize(None), "")


if __name__ == "__main__":
    unittest.main()
