"""Logic for generating reports on a documentation extraction run."""

import json
import time
from pathlib import Path
from typing import Any

from jsdoc_mdx.models import ExtractionResult


class ExtractionReport:
    """Collects per-file outcomes and declaration counts for one package run."""

    def __init__(self, package: str, strategy: str) -> None:
        """Initialize the report with metadata."""
        self.package = package
        self.strategy = strategy
        self.files: list[dict[str, str]] = []
        self.counts: dict[str, int] = {}
        self.documents_written = 0
        self.start_time = time.time()

    def add_result(self, result: ExtractionResult) -> None:
        """Record the file outcomes and counts of an extraction snapshot."""
        self.files = [{"path": p, "status": "processed"} for p in result.files_processed]
        self.files += [
            {"path": p, "status": "skipped", "reason": reason}
            for p, reason in result.files_skipped
        ]
        self.counts = result.counts()

    def generate_report(self, path: str | Path) -> None:
        """Write the summary report to a JSON file."""
        report = {
            "meta": {
                "timestamp": time.time(),
                "duration": time.time() - self.start_time,
                "package": self.package,
                "strategy": self.strategy,
            },
            "files": self.files,
            "stats": self._compute_stats(),
        }

        Path(path).write_text(json.dumps(report, indent=2), encoding="utf-8")

    def _compute_stats(self) -> dict[str, Any]:
        processed = sum(1 for f in self.files if f["status"] == "processed")
        return {
            "files_processed": processed,
            "files_skipped": len(self.files) - processed,
            "declarations": dict(self.counts),
            "total_declarations": sum(self.counts.values()),
            "documents_written": self.documents_written,
        }
