"""Logic for patching the docs site navigation manifest."""

import json
import logging
from pathlib import Path
from typing import Any

from jsdoc_mdx.errors import NavigationError
from jsdoc_mdx.package_config import PackageConfig

logger = logging.getLogger(__name__)


class NavigationUpdater:
    """Points a JSON navigation manifest at a package's generated pages."""

    def __init__(
        self,
        path: Path,
        tab: str = "Packages",
        redirect_prefix: str = "/api-reference",
    ) -> None:
        """Initialize the updater with the manifest path and where packages live."""
        self.path = Path(path)
        self.tab = tab
        self.redirect_prefix = redirect_prefix.rstrip("/")
        self.data: dict[str, Any] = {}

    def load(self) -> None:
        """Read the manifest, raising NavigationError if it is missing or invalid."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as exc:
            msg = f"Cannot read navigation manifest {self.path}: {exc}"
            raise NavigationError(msg) from exc
        except json.JSONDecodeError as exc:
            msg = f"Invalid JSON in navigation manifest {self.path}: {exc}"
            raise NavigationError(msg) from exc
        if not isinstance(data, dict):
            msg = f"Navigation manifest {self.path} must contain a JSON object"
            raise NavigationError(msg)
        self.data = data

    def _find_or_create_tab(self) -> dict[str, Any]:
        navigation = self.data.setdefault("navigation", {})
        tabs = navigation.setdefault("tabs", [])
        for tab in tabs:
            if tab.get("tab") == self.tab:
                tab.setdefault("groups", [])
                return tab
        logger.info("Creating navigation tab %s", self.tab)
        tab = {"tab": self.tab, "groups": []}
        tabs.append(tab)
        return tab

    def update(
        self, package: PackageConfig, page_groups: list[dict[str, Any]] | None = None
    ) -> None:
        """Replace the package group's pages with the index plus nested groups.

        Groups configured for the package take precedence over ``page_groups``.
        """
        tab = self._find_or_create_tab()
        group = next(
            (g for g in tab["groups"] if g.get("group") == package.display_name), None
        )
        if group is None:
            group = {"group": package.display_name, "icon": package.icon, "pages": []}
            tab["groups"].append(group)
        else:
            group["icon"] = package.icon

        pages: list[Any] = [f"{package.output_path}/index"]
        if package.nav_groups:
            nested = [_configured_group(package, g) for g in package.nav_groups]
        else:
            nested = page_groups or []
        pages += [g for g in nested if g["pages"]]
        group["pages"] = pages

    def update_redirects(self, package: PackageConfig) -> None:
        """Replace the package's redirects; later entries win for a repeated source."""
        root = f"/{package.output_path}"
        redirects = [
            r
            for r in self.data.get("redirects", [])
            if not _is_under(str(r.get("destination", "")), root)
        ]
        redirects.append(
            {
                "source": f"{self.redirect_prefix}/{package.key}",
                "destination": f"/{package.output_path}/index",
            }
        )
        redirects += [dict(r) for r in package.redirects]

        by_source: dict[str, dict[str, Any]] = {}
        for redirect in redirects:
            by_source[redirect.get("source", "")] = redirect
        self.data["redirects"] = list(by_source.values())

    def save(self) -> None:
        self.path.write_text(
            json.dumps(self.data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )


def _configured_group(package: PackageConfig, group: dict[str, Any]) -> dict[str, Any]:
    pages = []
    for page in group.get("pages") or []:
        page = str(page)
        pages.append(page if "/" in page else f"{package.output_path}/{page}")
    return {"group": group.get("group") or group.get("name", ""), "pages": pages}


def _is_under(destination: str, root: str) -> bool:
    return destination == root or destination.startswith(f"{root}/")
