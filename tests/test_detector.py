"""Tests for issuer detection."""
import unittest

from cardsense.parser.detector import BankDetector
from cardsense.parser.templates import BANK_TEMPLATES, GENERIC_TEMPLATE, get_template
from cardsense.utils.events import RecordingEventSink


class TestBankDetector(unittest.TestCase):
    """Test marker scanning and detection order."""
    
    def setUp(self):
        self.events = RecordingEventSink()
        self.detector = BankDetector(events=self.events)
    
    def test_detects_each_issuer(self):
        cases = {
            "HDFC Bank Credit Card Statement": "hdfc",
            "SBI Card Monthly Statement": "sbi",
            "ICICI Bank Limited": "icici",
            "Axis Bank Credit Card": "axis",
            "Kotak Mahindra Bank": "kotak",
            "Citibank N.A.": "citi",
            "American Express Banking Corp.": "amex",
            "IndusInd Bank Statement": "indusind",
            "Yes Bank Card Statement": "yes_bank",
            "Standard Chartered Bank": "standard_chartered",
        }
        for text, key in cases.items():
            with self.subTest(text=text):
                self.assertEqual(self.detector.detect_key(text), key)
    
    def test_first_marker_in_order_wins(self):
        # Co-branded text mentioning two issuers resolves by registry order
        text = "Payments via Axis Bank gateway\nHDFC Bank Credit Card Statement"
        self.assertEqual(self.detector.detect_key(text), "hdfc")
    
    def test_marker_must_be_a_word(self):
        self.assertEqual(self.detector.detect_key("SUBSBIDIARY NOTICE"), "unknown")
    
    def test_unknown_issuer(self):
        template = self.detector.detect("FIRSTCARD FINANCE LTD")
        
        self.assertIs(template, GENERIC_TEMPLATE)
        self.assertTrue(template.is_generic)
        self.assertEqual(self.events.names(), ["bank_not_detected"])
    
    def test_empty_text(self):
        self.assertIs(self.detector.detect(""), GENERIC_TEMPLATE)
        self.assertIs(self.detector.detect(None), GENERIC_TEMPLATE)
    
    def test_detection_event(self):
        self.detector.detect("Kotak Mahindra Bank")
        self.assertEqual(self.events.find("bank_detected"), [{"bank": "kotak", "has_grammar": True}])
    
    def test_detection_only_templates_have_no_grammar(self):
        for key in ("citi", "indusind", "yes_bank", "standard_chartered"):
            with self.subTest(key=key):
                self.assertFalse(get_template(key).has_grammar)
    
    def test_custom_template_list(self):
        detector = BankDetector(templates=[get_template("amex")], events=self.events)
        self.assertEqual(detector.detect_key("HDFC Bank"), "unknown")
        self.assertEqual(detector.detect_key("AMEX card"), "amex")
    
    def test_registry_keys_unique(self):
        keys = [template.key for template in BANK_TEMPLATES]
        self.assertEqual(len(keys), len(set(keys)))


if __name__ == "__main__":
    unittest.main()
