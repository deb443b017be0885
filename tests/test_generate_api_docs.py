"""End-to-end tests for the generate_api_docs command."""

import json
from pathlib import Path

import pytest
import yaml

from jsdoc_mdx.generate_api_docs import main

COUNTER_JS = """
/**
 * Represents a counter.
 * @param {number} [start=0] - initial value
 * @example
 * const c = new Counter(5);
 */
export class Counter {
  constructor(start) { this.label = "{"; }

  /**
   * Add one.
   * @fires update:counter
   */
  increment() {}
}

/** Internal helper. */
function helper() {}

/** Does X */
function useFoo() {}
export const useBar = useFoo;
"""

TYPES_DTS = """
/** Options for joining. */
export interface JoinOptions {
  /** Session name. */
  name: string;
}
"""


def _project(tmp_path: Path, **package: object) -> tuple[Path, Path]:
    src = tmp_path / "src"
    src.mkdir()
    (src / "counter.js").write_text(COUNTER_JS, encoding="utf-8")
    (src / "broken.ts").write_text("export class Broken {\n  m() {\n", encoding="utf-8")
    (src / "counter.test.js").write_text("export function testOnly() {}\n", encoding="utf-8")
    types = tmp_path / "types"
    types.mkdir()
    (types / "index.d.ts").write_text(TYPES_DTS, encoding="utf-8")

    config = {
        "packages": {
            "client": {
                "name": "@acme/client",
                "display_name": "Acme Client",
                "source_paths": ["src"],
                "types_file": "types/index.d.ts",
                "output_path": "packages/client",
                **package,
            }
        }
    }
    config_path = tmp_path / "api-docs.yml"
    config_path.write_text(yaml.dump(config), encoding="utf-8")

    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "docs.json").write_text(json.dumps({"navigation": {"tabs": []}}), encoding="utf-8")
    return config_path, docs


def _args(config_path: Path, docs: Path, *extra: str) -> list[str]:
    return ["--package", "client", "--config", str(config_path), "--docs-root", str(docs), *extra]


def _tree(root: Path) -> dict[str, bytes]:
    return {p.relative_to(root).as_posix(): p.read_bytes() for p in root.rglob("*.mdx")}


def test_main_integration(tmp_path: Path) -> None:
    """Test extraction, rendering, navigation and the run report together."""
    config_path, docs = _project(tmp_path)
    report = tmp_path / "report.json"

    assert main(_args(config_path, docs, "--report", str(report))) == 0

    out = docs / "packages" / "client"
    assert sorted(_tree(out)) == [
        "components/classes/Counter.mdx",
        "components/events/update_counter.mdx",
        "components/hooks/useBar.mdx",
        "components/interfaces/JoinOptions.mdx",
        "index.mdx",
    ]
    counter = (out / "components/classes/Counter.mdx").read_text(encoding="utf-8")
    assert "## Counter" in counter
    assert '<ParamField path="start" type="number" required={false} default="0">' in counter
    assert "increment(): void" in counter

    use_bar = (out / "components/hooks/useBar.mdx").read_text(encoding="utf-8")
    assert "Does X" in use_bar

    all_text = "".join(p.read_text(encoding="utf-8") for p in out.rglob("*.mdx"))
    assert "helper" not in all_text
    assert "testOnly" not in all_text

    manifest = json.loads((docs / "docs.json").read_text(encoding="utf-8"))
    group = manifest["navigation"]["tabs"][0]["groups"][0]
    assert group["group"] == "Acme Client"
    assert group["pages"] == ["packages/client/index"]
    assert {"source": "/api-reference/client", "destination": "/packages/client/index"} in (
        manifest["redirects"]
    )

    stats = json.loads(report.read_text(encoding="utf-8"))["stats"]
    assert stats["files_processed"] == 2  # noqa: PLR2004
    assert stats["files_skipped"] == 1
    assert stats["declarations"]["classes"] == 1
    assert stats["documents_written"] == 5  # noqa: PLR2004


def test_generation_is_idempotent(tmp_path: Path) -> None:
    """Test that a second run over unchanged input writes identical files."""
    config_path, docs = _project(tmp_path)
    assert main(_args(config_path, docs)) == 0
    first = _tree(docs)
    manifest = (docs / "docs.json").read_bytes()

    assert main(_args(config_path, docs)) == 0
    assert _tree(docs) == first
    assert (docs / "docs.json").read_bytes() == manifest


def test_pages_strategy_override(tmp_path: Path) -> None:
    """Test that --strategy pages writes standalone pages and nested nav groups."""
    config_path, docs = _project(tmp_path)
    assert main(_args(config_path, docs, "--strategy", "pages")) == 0

    out = docs / "packages" / "client"
    assert (out / "classes" / "Counter.mdx").exists()
    assert (out / "hooks" / "useBar.mdx").exists()

    manifest = json.loads((docs / "docs.json").read_text(encoding="utf-8"))
    pages = manifest["navigation"]["tabs"][0]["groups"][0]["pages"]
    assert pages[0] == "packages/client/index"
    assert {"group": "Classes", "pages": ["packages/client/classes/Counter"]} in pages


def test_no_nav_and_dry_run(tmp_path: Path) -> None:
    """Test that --no-nav keeps the manifest and --dry-run writes nothing."""
    config_path, docs = _project(tmp_path)
    original = (docs / "docs.json").read_text(encoding="utf-8")

    assert main(_args(config_path, docs, "--no-nav")) == 0
    assert (docs / "packages" / "client" / "index.mdx").exists()
    assert (docs / "docs.json").read_text(encoding="utf-8") == original

    dry_docs = tmp_path / "dry"
    dry_docs.mkdir()
    assert main(_args(config_path, dry_docs, "--dry-run")) == 0
    assert list(dry_docs.iterdir()) == []


def test_unknown_package_exits(tmp_path: Path) -> None:
    """Test that an unknown package key stops with the available names."""
    config_path, docs = _project(tmp_path)
    args = ["--package", "vue", "--config", str(config_path), "--docs-root", str(docs)]
    with pytest.raises(SystemExit, match="Available packages: client"):
        main(args)


def test_missing_manifest_exits(tmp_path: Path) -> None:
    """Test that a missing navigation manifest is reported before any work."""
    config_path, docs = _project(tmp_path)
    (docs / "docs.json").unlink()
    with pytest.raises(SystemExit, match="Cannot read navigation manifest"):
        main(_args(config_path, docs))
    assert not (docs / "packages").exists()
