"""Per-run extraction state: parses files, filters exports and resolves aliases."""

import copy
import logging
from pathlib import Path

from jsdoc_mdx.brace_scanner import scan_source
from jsdoc_mdx.errors import SourceParseError
from jsdoc_mdx.models import (
    PRIVATE,
    ClassDecl,
    ConstantDecl,
    EnumDecl,
    EventRef,
    ExtractionResult,
    FunctionKind,
    FunctionLikeDecl,
    InterfaceDecl,
    SourceDeclaration,
    TypeAliasDecl,
)
from jsdoc_mdx.source_parser import ParsedSource, parse_source

logger = logging.getLogger(__name__)

JS_PARSERS = ("ast", "scan")
SCAN_EXTENSIONS = (".js", ".jsx", ".mjs", ".cjs")


class DocExtractor:
    """Collects declarations from source files and hands out immutable snapshots.

    Files are parsed one at a time. A file that fails to parse is recorded as
    skipped and never aborts the run.
    """

    def __init__(self, js_parser: str = "ast") -> None:
        """Choose how plain JavaScript files are parsed (``ast`` or ``scan``)."""
        if js_parser not in JS_PARSERS:
            msg = f"Unknown js_parser: {js_parser}. Expected one of: {', '.join(JS_PARSERS)}"
            raise SystemExit(msg)
        self.js_parser = js_parser
        self.declarations: list[SourceDeclaration] = []
        self.files_processed: list[str] = []
        self.files_skipped: list[tuple[str, str]] = []

    def extract_text(
        self, text: str, file_name: str, *, docs_only: bool = False
    ) -> ParsedSource:
        """Parse one file's text and keep its declarations.

        Raises SourceParseError when neither extraction mode can handle the text.
        """
        is_plain_js = file_name.endswith(SCAN_EXTENSIONS)
        if is_plain_js and self.js_parser == "scan":
            parsed = scan_source(text, file_name, docs_only=docs_only)
        else:
            try:
                parsed = parse_source(text, file_name, docs_only=docs_only)
            except SourceParseError as exc:
                if not is_plain_js:
                    raise
                logger.info("Retrying %s in scan mode: %s", file_name, exc)
                parsed = scan_source(text, file_name, docs_only=docs_only)
        self.declarations.extend(parsed.declarations)
        return parsed

    def extract_file(self, path: Path, *, docs_only: bool = False) -> bool:
        """Extract one file, returning False when it was skipped."""
        file_name = str(path)
        try:
            text = path.read_text(encoding="utf-8")
            parsed = self.extract_text(text, file_name, docs_only=docs_only)
        except (SourceParseError, OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping %s: %s", file_name, exc)
            self.files_skipped.append((file_name, str(exc)))
            return False
        logger.debug("%s: %d declarations", file_name, len(parsed.declarations))
        self.files_processed.append(file_name)
        return True

    def extract_files(self, paths: list[Path], *, docs_only: bool = False) -> int:
        """Extract files in order and return how many were processed."""
        return sum(self.extract_file(p, docs_only=docs_only) for p in paths)

    def snapshot(self) -> ExtractionResult:
        """Return the exported, documented-visible declarations grouped by category.

        The snapshot works on a copy, so later extraction does not change it.
        """
        declarations = copy.deepcopy(self.declarations)
        _resolve_aliases(declarations)
        kept = [
            d
            for d in declarations
            if d.is_exported and not d.doc.ignored and d.doc.visibility != PRIVATE
        ]

        buckets: dict[str, list] = {
            "classes": [],
            "interfaces": [],
            "hooks": [],
            "components": [],
            "functions": [],
            "types": [],
            "enums": [],
            "constants": [],
        }
        for decl in kept:
            buckets[_category_of(decl)].append(decl)

        return ExtractionResult(
            classes=tuple(buckets["classes"]),
            interfaces=tuple(buckets["interfaces"]),
            hooks=tuple(buckets["hooks"]),
            components=tuple(buckets["components"]),
            functions=tuple(buckets["functions"]),
            types=tuple(buckets["types"]),
            enums=tuple(buckets["enums"]),
            constants=tuple(buckets["constants"]),
            events=tuple(collect_events(kept)),
            files_processed=tuple(self.files_processed),
            files_skipped=tuple(self.files_skipped),
        )


def _category_of(decl: SourceDeclaration) -> str:
    if isinstance(decl, ClassDecl):
        return "classes"
    if isinstance(decl, InterfaceDecl):
        return "interfaces"
    if isinstance(decl, TypeAliasDecl):
        return "types"
    if isinstance(decl, EnumDecl):
        return "enums"
    if isinstance(decl, ConstantDecl):
        return "constants"
    if decl.kind == FunctionKind.HOOK:
        return "hooks"
    if decl.kind == FunctionKind.COMPONENT:
        return "components"
    return "functions"


def _resolve_aliases(declarations: list[SourceDeclaration]) -> None:
    functions = [d for d in declarations if isinstance(d, FunctionLikeDecl)]
    by_name: dict[str, FunctionLikeDecl] = {}
    # a concrete declaration wins over an alias of the same name
    for fn in sorted(functions, key=lambda f: f.is_alias):
        by_name.setdefault(fn.name, fn)

    for fn in functions:
        if fn.is_alias:
            _resolve_alias(fn, by_name)


def _resolve_alias(alias: FunctionLikeDecl, by_name: dict[str, FunctionLikeDecl]) -> None:
    seen = {alias.name}
    target_name = alias.alias_of
    target = None
    while target_name is not None and target_name not in seen:
        seen.add(target_name)
        candidate = by_name.get(target_name)
        if candidate is None:
            break
        if not candidate.is_alias:
            target = candidate
            break
        target_name = candidate.alias_of

    if target is None:
        logger.warning(
            "%s: alias %s -> %s could not be resolved",
            alias.file_name,
            alias.name,
            alias.alias_of,
        )
        alias.alias_resolved = False
        if not alias.doc.description:
            alias.doc.description = f"Alias for `{alias.alias_of}`."
            alias.doc.summary = alias.doc.description
        return

    if not alias.doc.description:
        alias.doc = copy.deepcopy(target.doc)
    alias.parameters = copy.deepcopy(target.parameters)
    alias.return_type = target.return_type
    alias.is_async = target.is_async
    alias.type_parameters = list(target.type_parameters)


def collect_events(declarations: list[SourceDeclaration]) -> list[EventRef]:
    """Gather ``@fires`` names with their emitters, in first-seen order."""
    events: dict[str, EventRef] = {}

    def add(names: list[str], emitter: str) -> None:
        for name in names:
            ref = events.setdefault(name, EventRef(name=name))
            if emitter not in ref.emitters:
                ref.emitters.append(emitter)

    for decl in declarations:
        add(decl.doc.fires, decl.name)
        if not isinstance(decl, ClassDecl):
            continue
        if decl.constructor is not None:
            add(decl.constructor.doc.fires, f"{decl.name}#{decl.constructor.name}")
        for method in decl.static_methods:
            if method.visibility != PRIVATE:
                add(method.doc.fires, f"{decl.name}.{method.name}")
        for method in decl.methods:
            if method.visibility != PRIVATE:
                add(method.doc.fires, f"{decl.name}#{method.name}")
    return list(events.values())
