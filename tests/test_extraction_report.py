"""Tests for the ExtractionReport logic."""

import json
from pathlib import Path

from jsdoc_mdx.extraction_report import ExtractionReport
from jsdoc_mdx.models import ClassDecl, ExtractionResult, FunctionLikeDecl


def test_extraction_report_generation(tmp_path: Path) -> None:
    """Verify that the extraction report is generated correctly."""
    report = ExtractionReport("client", "components")

    result = ExtractionResult(
        classes=(ClassDecl(name="Session"), ClassDecl(name="Model")),
        functions=(FunctionLikeDecl(name="join"),),
        files_processed=("src/session.js", "src/model.js"),
        files_skipped=(("src/broken.ts", "src/broken.ts:3: unbalanced braces"),),
    )
    report.add_result(result)
    report.documents_written = 4

    output_file = tmp_path / "report.json"
    report.generate_report(str(output_file))

    assert output_file.exists()
    content = json.loads(output_file.read_text(encoding="utf-8"))

    assert content["meta"]["package"] == "client"
    assert content["meta"]["strategy"] == "components"
    assert content["meta"]["duration"] >= 0
    assert len(content["files"]) == 3  # noqa: PLR2004
    assert content["files"][2] == {
        "path": "src/broken.ts",
        "status": "skipped",
        "reason": "src/broken.ts:3: unbalanced braces",
    }

    stats = content["stats"]
    assert stats["files_processed"] == 2  # noqa: PLR2004
    assert stats["files_skipped"] == 1
    assert stats["declarations"]["classes"] == 2  # noqa: PLR2004
    assert stats["declarations"]["functions"] == 1
    assert stats["total_declarations"] == 3  # noqa: PLR2004
    assert stats["documents_written"] == 4  # noqa: PLR2004
