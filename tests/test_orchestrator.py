"""Tests for batch statement processing."""
import time
import unittest
from decimal import Decimal
from pathlib import Path

from cardsense.config import AppSettings
from cardsense.orchestrator import StatementProcessor
from cardsense.utils.events import RecordingEventSink
from cardsense.utils.exceptions import CardSenseError, ExtractionError, ZeroTransactionsError

FIXTURES = Path(__file__).parent / "fixtures"


class FakeExtractor:
    """Serves fixture text by file name instead of reading PDFs."""
    
    def __init__(self, documents, delays=None):
        self.documents = documents
        self.delays = delays or {}
        self.passwords = []
    
    def extract_text(self, path, password=None):
        self.passwords.append(password)
        time.sleep(self.delays.get(path.name, 0))
        source = self.documents[path.name]
        if isinstance(source, Exception):
            raise source
        return source


def fixture_text(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


class TestStatementProcessor(unittest.TestCase):
    """Test the document -> statement -> card flow."""
    
    def setUp(self):
        self.settings = AppSettings.load()
        self.events = RecordingEventSink()
        self.extractor = FakeExtractor({
            "hdfc.pdf": fixture_text("hdfc_statement.txt"),
            "sbi.pdf": fixture_text("sbi_statement.txt"),
            "generic.pdf": fixture_text("generic_statement.txt"),
            "broken.pdf": ExtractionError("broken.pdf", "file not found"),
            "crash.pdf": RuntimeError("stream ended unexpectedly"),
            "empty_kotak.pdf": "Kotak Mahindra Bank\nNo transactions this period",
        })
        self.processor = StatementProcessor(self.settings, extractor=self.extractor, events=self.events)
    
    def test_process_document(self):
        statement = self.processor.process_document(Path("hdfc.pdf"))
        
        self.assertEqual(statement.institution_name, "HDFC")
        self.assertEqual(len(statement.transactions), 5)
    
    def test_unexpected_extractor_error_wrapped(self):
        with self.assertRaises(ExtractionError) as ctx:
            self.processor.process_document(Path("crash.pdf"))
        
        self.assertEqual(ctx.exception.file_name, "crash.pdf")
        self.assertIn("stream ended unexpectedly", str(ctx.exception))
    
    def test_card_ids_follow_slot_order(self):
        result = self.processor.analyze_batch([[Path("sbi.pdf")], [Path("hdfc.pdf")]])
        
        self.assertTrue(result.succeeded)
        self.assertEqual([card.card_id for card in result.cards], ["card-1", "card-2"])
        self.assertEqual([card.name for card in result.cards], ["SBI Credit Card", "HDFC Credit Card"])
    
    def test_documents_of_one_card_merged(self):
        result = self.processor.analyze_batch([["hdfc.pdf", "hdfc.pdf"]])
        card = result.cards[0]
        
        self.assertEqual(card.transaction_count, 10)
        self.assertEqual(card.total_spend, Decimal("48912.00"))
        self.assertEqual(len(card.monthly_data), 2)
        self.assertEqual(card.last_month_spend, Decimal("24456.00"))
    
    def test_merge_follows_input_order_not_completion_order(self):
        # The first document finishes last
        self.processor.extractor.delays = {"hdfc.pdf": 0.2}
        result = self.processor.analyze_batch([["hdfc.pdf", "generic.pdf"]])
        
        card = result.cards[0]
        self.assertEqual(card.name, "HDFC Credit Card")
        self.assertEqual(card.limit, Decimal("200000"))
    
    def test_failed_document_isolated(self):
        result = self.processor.analyze_batch([
            ["hdfc.pdf"],
            ["sbi.pdf", "broken.pdf"],
            ["empty_kotak.pdf"],
        ])
        
        self.assertFalse(result.succeeded)
        self.assertEqual([card.card_id for card in result.cards], ["card-1", "card-2"])
        self.assertEqual(result.cards[1].transaction_count, 4)
        
        self.assertEqual([f.file_name for f in result.failures], ["broken.pdf", "empty_kotak.pdf"])
        self.assertEqual([f.slot for f in result.failures], [1, 2])
        self.assertIsInstance(result.failures[1].error, ZeroTransactionsError)
        self.assertEqual(result.failures[1].to_dict()["error_type"], "ZeroTransactionsError")
    
    def test_abort_on_failure(self):
        with self.assertRaises(CardSenseError):
            self.processor.analyze_batch([["hdfc.pdf"], ["broken.pdf"]], abort_on_failure=True)
    
    def test_abort_on_failure_from_settings(self):
        self.settings.abort_on_failure = True
        with self.assertRaises(ExtractionError):
            self.processor.analyze_batch([["broken.pdf"]])
    
    def test_all_documents_failed(self):
        result = self.processor.analyze_batch([["broken.pdf"], ["crash.pdf"]])
        
        self.assertEqual(result.cards, [])
        self.assertEqual(len(result.failures), 2)
    
    def test_password_passed_to_extractor(self):
        processor = StatementProcessor(
            self.settings,
            extractor=self.extractor,
            events=self.events,
            password="secret"
        )
        processor.process_document(Path("sbi.pdf"))
        self.assertEqual(self.extractor.passwords, ["secret"])
    
    def test_events_reach_injected_sink(self):
        self.processor.analyze_batch([["sbi.pdf"]])
        names = self.events.names()
        
        self.assertIn("bank_detected", names)
        self.assertIn("transactions_parsed", names)
        self.assertEqual(names[-1], "card_analyzed")
    
    def test_to_dict(self):
        data = self.processor.analyze_batch([["sbi.pdf"], ["broken.pdf"]]).to_dict()
        
        self.assertEqual(data["cards"][0]["id"], "card-1")
        self.assertEqual(data["failures"][0]["file_name"], "broken.pdf")


if __name__ == "__main__":
    unittest.main()
