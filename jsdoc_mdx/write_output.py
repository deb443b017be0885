"""Logic for writing generated documents to disk."""

from pathlib import Path

from jsdoc_mdx.render_strategy import GeneratedDocument


def output_file_for_document(out_root: Path, document: GeneratedDocument) -> Path:
    """Determine the output file path for a generated document."""
    p = out_root / document.path
    p.parent.mkdir(parents=True, exist_ok=True)
    return p


def write_documents(out_root: Path, documents: list[GeneratedDocument]) -> int:
    """Write every document, replacing whole files, and return the count."""
    written = 0
    for document in documents:
        out_file = output_file_for_document(out_root, document)
        out_file.write_text(document.content, encoding="utf-8", newline="\n")
        written += 1
    return written
