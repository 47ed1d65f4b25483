"""Data models for enrich_articles pipeline stage."""

from dataclasses import dataclass, field

MAX_ERROR_SAMPLES = 20


@dataclass
class ItemError:
    item_id: str
    message: str


@dataclass
class BatchResult:
    """Counts for one enrichment stage, with a bounded sample of failures."""
    stage: str
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    errors: list[ItemError] = field(default_factory=list)

    def record_failure(self, item_id: str, message: str) -> None:
        self.failed += 1
        if len(self.errors) < MAX_ERROR_SAMPLES:
            self.errors.append(ItemError(item_id=item_id, message=message))
