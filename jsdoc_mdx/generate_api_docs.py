"""Generate MDX API reference pages from the JSDoc comments of a JS/TS package.

The package is selected by name from a YAML configuration file. Its sources are
located, parsed into declarations, rendered with an output strategy and written
under the docs root, and the site navigation manifest is pointed at the result.
"""

import argparse
import logging
from pathlib import Path

from jsdoc_mdx.errors import NavigationError
from jsdoc_mdx.extraction_report import ExtractionReport
from jsdoc_mdx.extractor import DocExtractor
from jsdoc_mdx.load_config import load_config
from jsdoc_mdx.models import ExtractionResult
from jsdoc_mdx.navigation import NavigationUpdater
from jsdoc_mdx.package_config import PackageConfig, get_package_config
from jsdoc_mdx.render_strategy import CATEGORIES, CATEGORY_TITLES, get_strategy
from jsdoc_mdx.source_locator import locate_source_files
from jsdoc_mdx.write_output import write_documents

logger = logging.getLogger(__name__)


def _load_navigation(args: argparse.Namespace, config: dict) -> NavigationUpdater | None:
    if args.no_nav or args.dry_run:
        return None
    nav_config = config["navigation"]
    nav = NavigationUpdater(
        Path(args.docs_root) / nav_config["manifest"],
        tab=nav_config["tab"],
        redirect_prefix=nav_config["redirect_prefix"],
    )
    try:
        nav.load()
    except NavigationError as exc:
        raise SystemExit(str(exc)) from exc
    return nav


def _extract(
    package: PackageConfig, config: dict, base_dir: Path
) -> ExtractionResult:
    files = locate_source_files(
        base_dir,
        package.source_paths,
        package.file_patterns,
        config["extensions"],
        config["exclude_markers"],
    )
    print(f"Found {len(files)} source files for {package.display_name}")

    extractor = DocExtractor(config["js_parser"])
    extractor.extract_files(files)

    for extra, docs_only in ((package.types_file, False), (package.jsdoc_file, True)):
        if not extra:
            continue
        path = (base_dir / extra).resolve()
        if path in files:
            continue
        if not path.exists():
            logger.warning("Configured file does not exist: %s", path)
            continue
        print(f"Processing {path.name}...")
        extractor.extract_file(path, docs_only=docs_only)

    return extractor.snapshot()


def _print_summary(result: ExtractionResult) -> None:
    counts = result.counts()
    print("Extracted:")
    for category in CATEGORIES:
        print(f"  - {counts[category]} {CATEGORY_TITLES[category].lower()}")
    print(
        f"{len(result.files_processed)} files processed, "
        f"{len(result.files_skipped)} files skipped"
    )


def run_generation(args: argparse.Namespace) -> int:
    """Execute the extraction and rendering pipeline for one package."""
    config_path = Path(args.config)
    config = load_config(config_path)
    package = get_package_config(config, args.package)
    strategy_name = args.strategy or package.strategy or config["strategy"]
    strategy = get_strategy(strategy_name, package)
    base_dir = Path(args.base_dir) if args.base_dir else config_path.resolve().parent

    nav = _load_navigation(args, config)
    report = ExtractionReport(package.key, strategy_name) if args.report else None

    print(f"Generating documentation for {package.display_name} ({strategy_name})")
    result = _extract(package, config, base_dir)
    _print_summary(result)

    documents = strategy.render(result)
    index = strategy.render_index(documents)

    if args.dry_run:
        print(f"Dry run: {len(documents) + 1} documents rendered, nothing written")
    else:
        out_root = (Path(args.docs_root) / package.output_path).resolve()
        written = write_documents(out_root, [*documents, index])
        print(f"Generated {written} MDX files into: {out_root}")
        if report is not None:
            report.documents_written = written

    if nav is not None:
        nav.update(package, strategy.page_groups(documents))
        nav.update_redirects(package)
        nav.save()
        print(f"Updated navigation in {nav.path}")

    if report is not None:
        report.add_result(result)
        report.generate_report(args.report)
        print(f"Report written to {args.report}")

    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Generate MDX API reference pages from JSDoc/TSDoc comments.",
    )
    ap.add_argument(
        "--package",
        "-p",
        required=True,
        help="Package key from the configuration file",
    )
    ap.add_argument(
        "--config",
        default="api-docs.yml",
        help="Path to configuration file (default: api-docs.yml)",
    )
    ap.add_argument(
        "--base-dir",
        help="Directory source paths are relative to (default: the config file's directory)",
    )
    ap.add_argument(
        "--docs-root",
        default=".",
        help="Docs site root holding output pages and the navigation manifest",
    )
    ap.add_argument(
        "--strategy",
        help="Output strategy: components or pages (overrides the configuration)",
    )
    ap.add_argument(
        "--no-nav",
        action="store_true",
        help="Do not update the navigation manifest",
    )
    ap.add_argument(
        "--dry-run",
        action="store_true",
        help="Extract and render without writing any files",
    )
    ap.add_argument(
        "--report",
        help="Write a JSON run report to this path",
    )
    ap.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return ap


def main(argv: list[str] | None = None) -> int:
    """Run the documentation generator."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return run_generation(args)


if __name__ == "__main__":
    raise SystemExit(main())
