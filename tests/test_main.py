"""Tests for the command line interface."""
import io
import json
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

from cardsense import main as cli
from cardsense.config.settings import reset_settings
from cardsense.utils.logger import configure_logging

FIXTURES = Path(__file__).parent / "fixtures"


def fake_extract(self, path, password=None):
    return (FIXTURES / path.name.replace(".pdf", ".txt")).read_text(encoding="utf-8")


class TestCLI(unittest.TestCase):
    """Test argument handling and exit codes."""
    
    def tearDown(self):
        reset_settings()
        configure_logging("INFO")
    
    def run_cli(self, *argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            code = cli.main(list(argv))
        return code, stdout.getvalue(), stderr.getvalue()
    
    def test_card_argument_groups(self):
        args = cli.build_parser().parse_args([
            "analyze", "--card", "a.pdf", "b.pdf", "--card", "c.pdf"
        ])
        self.assertEqual(args.cards, [[Path("a.pdf"), Path("b.pdf")], [Path("c.pdf")]])
        self.assertIsNone(args.abort_on_failure)
    
    def test_missing_file_exits_with_all_failed(self):
        code, stdout, _ = self.run_cli("--log-level", "ERROR", "analyze", "--card", "does_not_exist.pdf")
        
        self.assertEqual(code, cli.EXIT_ALL_FAILED)
        payload = json.loads(stdout)
        self.assertEqual(payload["cards"], [])
        self.assertEqual(payload["failures"][0]["error_type"], "ExtractionError")
    
    def test_abort_on_failure_exits_with_error(self):
        code, _, stderr = self.run_cli(
            "--log-level", "ERROR", "analyze", "--card", "does_not_exist.pdf", "--abort-on-failure"
        )
        self.assertEqual(code, cli.EXIT_ERROR)
        self.assertIn("does_not_exist.pdf", stderr)
    
    def test_bad_config_exits_with_error(self):
        code, _, stderr = self.run_cli("--config", "missing.yaml", "analyze", "--card", "a.pdf")
        
        self.assertEqual(code, cli.EXIT_ERROR)
        self.assertIn("Configuration file not found", stderr)
    
    def test_bad_log_level_exits_with_error(self):
        code, _, stderr = self.run_cli("--log-level", "LOUD", "analyze", "--card", "a.pdf")
        
        self.assertEqual(code, cli.EXIT_ERROR)
        self.assertIn("Unknown log level", stderr)
    
    @mock.patch("cardsense.pdf.processor.PDFProcessor.extract_text", fake_extract)
    def test_analyze_outputs_json(self):
        code, stdout, _ = self.run_cli(
            "--log-level", "ERROR", "analyze", "--card", "hdfc_statement.pdf", "--card", "sbi_statement.pdf"
        )
        
        self.assertEqual(code, 0)
        payload = json.loads(stdout)
        self.assertEqual([card["id"] for card in payload["cards"]], ["card-1", "card-2"])
        self.assertEqual(payload["cards"][0]["total_spend"], "24456.00")
    
    @mock.patch("cardsense.pdf.processor.PDFProcessor.extract_text", fake_extract)
    def test_recommend(self):
        code, stdout, _ = self.run_cli(
            "--log-level", "ERROR", "recommend",
            "--card", "hdfc_statement.pdf",
            "--card", "sbi_statement.pdf",
            "--category", "dining",
            "--amount", "1000",
            "--priority", "safety"
        )
        
        self.assertEqual(code, 0)
        payload = json.loads(stdout)
        # SBI sits at 2.4% utilization against HDFC's 12.2%
        self.assertEqual(payload["selected_card"]["card_id"], "card-2")
        self.assertEqual(payload["failures"], [])
    
    @mock.patch("cardsense.pdf.processor.PDFProcessor.extract_text", fake_extract)
    def test_recommend_invalid_amount(self):
        code, _, stderr = self.run_cli(
            "--log-level", "ERROR", "recommend",
            "--card", "sbi_statement.pdf",
            "--category", "dining",
            "--amount", "-5"
        )
        self.assertEqual(code, cli.EXIT_ERROR)
        self.assertIn("Invalid recommendation request", stderr)


if __name__ == "__main__":
    unittest.main()
