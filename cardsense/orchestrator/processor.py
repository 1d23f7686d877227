"""Batch processing of statement documents into card analyses.

Each document is extracted and parsed on its own worker thread; documents
share no mutable state. Results are merged per card in the order the
documents were supplied, whatever order the workers finish in.
"""
import concurrent.futures
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from cardsense.analysis.analyzer import CardAnalyzer
from cardsense.analysis.merger import StatementMerger
from cardsense.analysis.models import CardAnalysis
from cardsense.config.settings import AppSettings, get_settings
from cardsense.parser.models import ParsedStatement
from cardsense.parser.statement_parser import StatementParser
from cardsense.pdf.normalizer import TextNormalizer
from cardsense.pdf.processor import PDFProcessor
from cardsense.utils.events import EventSink, LoggingEventSink
from cardsense.utils.exceptions import CardSenseError, ExtractionError
from cardsense.utils.logger import get_logger, set_document_context

logger = get_logger()


class TextExtractor(Protocol):
    """Turns a document into one ordered text blob."""
    
    def extract_text(self, path: Path, password: Optional[str] = None) -> str:
        ...


@dataclass
class DocumentFailure:
    """A document that could not be turned into a statement."""
    file_name: str
    slot: int
    error: CardSenseError
    
    def to_dict(self) -> dict:
        return {
            "file_name": self.file_name,
            "slot": self.slot,
            "error_type": type(self.error).__name__,
            "message": str(self.error),
        }


@dataclass
class BatchResult:
    """Analyses for cards that parsed, plus every document that did not."""
    cards: List[CardAnalysis] = field(default_factory=list)
    failures: List[DocumentFailure] = field(default_factory=list)
    
    @property
    def succeeded(self) -> bool:
        return not self.failures
    
    def to_dict(self) -> dict:
        return {
            "cards": [card.to_dict() for card in self.cards],
            "failures": [failure.to_dict() for failure in self.failures],
        }


class StatementProcessor:
    """Orchestrates the flow: Document -> Text -> Statement -> Merge -> Analysis."""
    
    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        extractor: Optional[TextExtractor] = None,
        events: Optional[EventSink] = None,
        password: Optional[str] = None
    ):
        self.settings = settings or get_settings()
        self.events = events or LoggingEventSink(logger)
        self.extractor = extractor or PDFProcessor()
        self.normalizer = TextNormalizer()
        self.parser = StatementParser(self.settings, events=self.events)
        self.merger = StatementMerger(self.events)
        self.analyzer = CardAnalyzer(self.settings, self.events)
        self.password = password
    
    def process_document(self, path: Path) -> ParsedStatement:
        """
        Extract and parse a single document.
        
        Raises:
            ExtractionError: If the extractor fails
            ZeroTransactionsError: If a known bank layout yields no rows
        """
        path = Path(path)
        set_document_context(path.name)
        try:
            logger.info(f"Processing {path.name}")
            try:
                raw_text = self.extractor.extract_text(path, self.password)
            except ExtractionError:
                raise
            except Exception as e:
                raise ExtractionError(path.name, str(e)) from e
            
            text = self.normalizer.normalize(raw_text)
            statement = self.parser.parse(text, file_name=path.name)
            logger.info(f"Parsed {len(statement.transactions)} transactions from {path.name}")
            return statement
        finally:
            set_document_context(None)
    
    def analyze_batch(
        self,
        slots: Sequence[Sequence[Path]],
        abort_on_failure: Optional[bool] = None
    ) -> BatchResult:
        """
        Analyze several cards, each given as a list of its statement documents.
        
        Args:
            slots: One list of documents per card
            abort_on_failure: Raise the first document failure instead of
                collecting it; defaults to the configured behaviour
            
        Returns:
            BatchResult with card ids "card-1", "card-2", ... by slot position
        """
        if abort_on_failure is None:
            abort_on_failure = self.settings.abort_on_failure
        
        jobs: List[Tuple[int, int, Path]] = [
            (slot_index, doc_index, Path(path))
            for slot_index, documents in enumerate(slots)
            for doc_index, path in enumerate(documents)
        ]
        
        statements: Dict[Tuple[int, int], ParsedStatement] = {}
        failures: List[Tuple[Tuple[int, int], DocumentFailure]] = []
        
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.settings.max_concurrent_documents) as executor:
            future_to_job = {
                executor.submit(self.process_document, path): (slot_index, doc_index, path)
                for slot_index, doc_index, path in jobs
            }
            
            for future in concurrent.futures.as_completed(future_to_job):
                slot_index, doc_index, path = future_to_job[future]
                try:
                    statements[(slot_index, doc_index)] = future.result()
                except CardSenseError as e:
                    logger.error(f"Failed to process {path.name}: {e}")
                    if abort_on_failure:
                        for pending in future_to_job:
                            pending.cancel()
                        raise
                    failures.append(((slot_index, doc_index), DocumentFailure(path.name, slot_index, e)))
        
        result = BatchResult(failures=[failure for _, failure in sorted(failures, key=lambda item: item[0])])
        
        for slot_index, documents in enumerate(slots):
            parsed = [
                statements[(slot_index, doc_index)]
                for doc_index in range(len(documents))
                if (slot_index, doc_index) in statements
            ]
            if not parsed:
                logger.warning(f"No usable statements for card slot {slot_index + 1}; skipping")
                continue
            
            merged = self.merger.merge(parsed)
            result.cards.append(self.analyzer.analyze(merged, f"card-{slot_index + 1}"))
        
        logger.info(
            f"Batch complete: {len(result.cards)} cards analyzed, "
            f"{len(jobs) - len(result.failures)} documents parsed, "
            f"{len(result.failures)} documents failed"
        )
        return result
