"""Output-format strategies that turn an extraction snapshot into MDX documents.

A strategy decides the file layout and the shape of the package index. The
declaration bodies themselves come from ``render_declarations`` and are shared
by every strategy.
"""

import re
from dataclasses import dataclass, field
from typing import Any

from jsdoc_mdx.mdx_text import anchor_for, escape_html, format_description, frontmatter
from jsdoc_mdx.models import EventRef, ExtractionResult
from jsdoc_mdx.package_config import PackageConfig
from jsdoc_mdx.render_declarations import render_declaration

CATEGORIES = (
    "classes",
    "interfaces",
    "hooks",
    "components",
    "functions",
    "types",
    "enums",
    "constants",
    "events",
)
CATEGORY_TITLES = {
    "classes": "Classes",
    "interfaces": "Interfaces",
    "hooks": "Hooks",
    "components": "Components",
    "functions": "Functions",
    "types": "Type Definitions",
    "enums": "Enumerations",
    "constants": "Constants",
    "events": "Events",
}
CATEGORY_ICONS = {
    "classes": "cube",
    "interfaces": "layer-group",
    "hooks": "hook",
    "components": "puzzle-piece",
    "functions": "function",
    "types": "code",
    "enums": "list",
    "constants": "hashtag",
    "events": "bolt",
}


@dataclass
class IndexEntry:
    """A declaration as listed on the index page."""

    name: str
    anchor: str
    summary: str = ""


@dataclass
class GeneratedDocument:
    """One MDX file produced by a strategy, with a path relative to the output dir."""

    path: str
    content: str
    category: str = ""
    name: str = ""
    entries: list[IndexEntry] = field(default_factory=list)

    @property
    def page(self) -> str:
        return self.path.removesuffix(".mdx")


def file_stem(name: str) -> str:
    return re.sub(r"[^\w-]", "_", name) or "_"


def unique_names(names: list[str]) -> list[str]:
    """Suffix repeated names (``Foo``, ``Foo2``, ``Foo3``) so no output is overwritten.

    Names are compared case-insensitively since output file systems may be.
    """
    used: set[str] = set()
    result = []
    for name in names:
        candidate = name
        n = 1
        while file_stem(candidate).lower() in used:
            n += 1
            candidate = f"{name}{n}"
        used.add(file_stem(candidate).lower())
        result.append(candidate)
    return result


def claim_anchor(name: str, used: set[str]) -> str:
    """Return the anchor for ``name``, suffixed until it is unique on the page."""
    base = anchor_for(name) or "item"
    anchor = base
    n = 1
    while anchor in used:
        n += 1
        anchor = f"{base}{n}"
    used.add(anchor)
    return anchor


def _summary(decl: Any) -> str:
    if isinstance(decl, EventRef):
        return f"Fired by {', '.join(decl.emitters)}." if decl.emitters else ""
    return decl.doc.summary


def render_narrative(package: PackageConfig) -> list[str]:
    """Architecture steps and common-pattern tabs configured for the package."""
    parts = []
    if package.architecture:
        parts += ["## Architecture Overview", "", "<Steps>"]
        for step in package.architecture:
            parts += [
                f'<Step title="{escape_html(step.get("title", ""))}">',
                str(step.get("body", "")).strip(),
                "</Step>",
            ]
        parts += ["</Steps>", ""]
    if package.patterns:
        parts += ["## Common Patterns", "", "<Tabs>"]
        for pattern in package.patterns:
            parts += [
                f'<Tab title="{escape_html(pattern.get("title", ""))}">',
                str(pattern.get("body", "")).strip(),
                "</Tab>",
            ]
        parts += ["</Tabs>", ""]
    return parts


class RenderStrategy:
    """Interface for output formats."""

    name = ""

    def __init__(self, package: PackageConfig) -> None:
        self.package = package

    def render(self, result: ExtractionResult) -> list[GeneratedDocument]:
        raise NotImplementedError

    def render_index(self, documents: list[GeneratedDocument]) -> GeneratedDocument:
        raise NotImplementedError

    def page_groups(self, documents: list[GeneratedDocument]) -> list[dict[str, Any]]:
        """Navigation groups for the generated pages, nested under the package index."""
        return []

    def _index_frontmatter(self) -> str:
        return frontmatter(
            {
                "title": self.package.display_name,
                "description": f"Complete API reference for {self.package.name}",
                "icon": self.package.icon,
            }
        )


class ComponentsStrategy(RenderStrategy):
    """Component files embedded into a single tabbed index page."""

    name = "components"

    def render(self, result: ExtractionResult) -> list[GeneratedDocument]:
        documents = []
        # anchors are unique across the index, aggregate wrapper ids included
        used_anchors = {anchor_for(c) for c in CATEGORIES if c in self.package.aggregate}
        for category in CATEGORIES:
            decls = list(getattr(result, category))
            if not decls:
                continue
            names = unique_names([d.name for d in decls])
            if category in self.package.aggregate:
                documents.append(self._render_aggregate(category, decls, names, used_anchors))
                continue
            for decl, unique in zip(decls, names):
                anchor = claim_anchor(unique, used_anchors)
                content = "\n".join(
                    [
                        f"## {decl.name}",
                        "",
                        f'<a id="{anchor}"></a>',
                        "",
                        render_declaration(decl),
                    ]
                )
                documents.append(
                    GeneratedDocument(
                        path=f"components/{category}/{file_stem(unique)}.mdx",
                        content=content,
                        category=category,
                        name=unique,
                        entries=[IndexEntry(decl.name, anchor, _summary(decl))],
                    )
                )
        return documents

    def _render_aggregate(
        self, category: str, decls: list[Any], names: list[str], used_anchors: set[str]
    ) -> GeneratedDocument:
        title = CATEGORY_TITLES[category]
        parts = [f"## {title}", "", "<AccordionGroup>"]
        entries = []
        for decl, unique in zip(decls, names):
            anchor = claim_anchor(unique, used_anchors)
            entries.append(IndexEntry(decl.name, anchor, _summary(decl)))
            parts += [
                f'<Accordion title="{escape_html(decl.name)}" id="{anchor}">',
                render_declaration(decl),
                "</Accordion>",
            ]
        parts.append("</AccordionGroup>")
        return GeneratedDocument(
            path=f"components/{category}/{file_stem(title.replace(' ', ''))}.mdx",
            content="\n".join(parts) + "\n",
            category=category,
            name=title,
            entries=entries,
        )

    def render_index(self, documents: list[GeneratedDocument]) -> GeneratedDocument:
        imports = {}
        used: set[str] = set()
        for doc in documents:
            base = "".join(
                word[:1].upper() + word[1:]
                for word in re.split(r"[^A-Za-z0-9]+", f"{doc.category} {doc.name}")
            )
            import_name = base
            n = 1
            while import_name in used:
                n += 1
                import_name = f"{base}{n}"
            used.add(import_name)
            imports[doc.path] = import_name

        parts = [self._index_frontmatter(), ""]
        parts += [f"import {name} from './{path}';" for path, name in imports.items()]
        parts += [
            "",
            "<Note>",
            "This documentation is auto-generated from the source code.",
            "</Note>",
            "",
            f"# {self.package.display_name}",
            "",
            self.package.welcome,
            "",
        ]

        if documents:
            parts += ["## API Reference", "", "<Tabs>"]
            for category in CATEGORIES:
                docs = [d for d in documents if d.category == category]
                if docs:
                    parts += self._category_tab(category, docs, imports)
            parts += ["</Tabs>", ""]

        parts += render_narrative(self.package)
        return GeneratedDocument(
            path="index.mdx", content="\n".join(parts).rstrip() + "\n", name="index"
        )

    def _category_tab(
        self, category: str, docs: list[GeneratedDocument], imports: dict[str, str]
    ) -> list[str]:
        title = CATEGORY_TITLES[category]
        icon = CATEGORY_ICONS[category]
        parts = [f'<Tab title="{title}">', f"### {title}", "", "<CardGroup cols={2}>"]
        for doc in docs:
            for entry in doc.entries:
                text = format_description(entry.summary) or f"Jump to {entry.name} documentation"
                parts += [
                    f'<Card title="{escape_html(entry.name)}" icon="{icon}" href="#{entry.anchor}">',
                    text,
                    "</Card>",
                ]
        parts += ["</CardGroup>", ""]
        for doc in docs:
            div_id = doc.entries[0].anchor if len(doc.entries) == 1 else anchor_for(category)
            parts += [f'<div id="{div_id}">', f"<{imports[doc.path]} />", "</div>", ""]
        parts.append("</Tab>")
        return parts


class PagesStrategy(RenderStrategy):
    """One standalone page per declaration, grouped by category in navigation."""

    name = "pages"

    def render(self, result: ExtractionResult) -> list[GeneratedDocument]:
        documents = []
        for category in CATEGORIES:
            decls = list(getattr(result, category))
            for decl, unique in zip(decls, unique_names([d.name for d in decls])):
                summary = _summary(decl)
                header = frontmatter(
                    {"title": decl.name, "description": summary or f"{decl.name} API reference"}
                )
                documents.append(
                    GeneratedDocument(
                        path=f"{category}/{file_stem(unique)}.mdx",
                        content=f"{header}\n\n{render_declaration(decl)}",
                        category=category,
                        name=unique,
                        entries=[IndexEntry(decl.name, anchor_for(unique), summary)],
                    )
                )
        return documents

    def render_index(self, documents: list[GeneratedDocument]) -> GeneratedDocument:
        parts = [
            self._index_frontmatter(),
            "",
            f"# {self.package.display_name}",
            "",
            self.package.welcome,
            "",
        ]
        for category in CATEGORIES:
            docs = [d for d in documents if d.category == category]
            if not docs:
                continue
            parts += [f"## {CATEGORY_TITLES[category]}", "", "<CardGroup cols={2}>"]
            for doc in docs:
                entry = doc.entries[0]
                href = f"/{self.package.output_path}/{doc.page}"
                parts += [
                    f'<Card title="{escape_html(entry.name)}" '
                    f'icon="{CATEGORY_ICONS[category]}" href="{href}">',
                    format_description(entry.summary) or f"{entry.name} reference",
                    "</Card>",
                ]
            parts += ["</CardGroup>", ""]
        parts += render_narrative(self.package)
        return GeneratedDocument(
            path="index.mdx", content="\n".join(parts).rstrip() + "\n", name="index"
        )

    def page_groups(self, documents: list[GeneratedDocument]) -> list[dict[str, Any]]:
        groups = []
        for category in CATEGORIES:
            pages = [
                f"{self.package.output_path}/{d.page}"
                for d in documents
                if d.category == category
            ]
            if pages:
                groups.append({"group": CATEGORY_TITLES[category], "pages": pages})
        return groups


STRATEGIES: dict[str, type[RenderStrategy]] = {
    ComponentsStrategy.name: ComponentsStrategy,
    PagesStrategy.name: PagesStrategy,
}


def get_strategy(name: str, package: PackageConfig) -> RenderStrategy:
    """Instantiate a strategy by name, exiting with the valid names when it is unknown."""
    strategy_cls = STRATEGIES.get(name)
    if strategy_cls is None:
        msg = f"Unknown strategy: {name}. Available strategies: {', '.join(STRATEGIES)}"
        raise SystemExit(msg)
    return strategy_cls(package)
