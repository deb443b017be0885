"""Package configuration records and lookup by name."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class PackageConfig:
    """One documented package, as configured under ``packages`` in the YAML file."""

    key: str
    name: str
    display_name: str
    output_path: str
    source_paths: list[str] = field(default_factory=list)
    file_patterns: list[str] = field(default_factory=list)
    icon: str = "code"
    nav_groups: list[dict[str, Any]] = field(default_factory=list)
    types_file: str | None = None
    jsdoc_file: str | None = None
    strategy: str | None = None
    aggregate: list[str] = field(default_factory=lambda: ["functions"])
    intro: str = ""
    architecture: list[dict[str, str]] = field(default_factory=list)
    patterns: list[dict[str, str]] = field(default_factory=list)
    redirects: list[dict[str, str]] = field(default_factory=list)

    @property
    def welcome(self) -> str:
        if self.intro:
            return self.intro.strip()
        return (
            f"Welcome to the API reference for {self.name}. This documentation "
            f"covers everything exported by the {self.display_name} package."
        )


def package_from_dict(key: str, raw: dict[str, Any], default_patterns: list[str]) -> PackageConfig:
    """Build a PackageConfig from its YAML mapping."""
    navigation = raw.get("navigation") or {}
    narrative = raw.get("narrative") or {}
    aggregate = raw.get("aggregate")
    return PackageConfig(
        key=key,
        name=raw.get("name", key),
        display_name=raw.get("display_name", raw.get("name", key)),
        output_path=str(raw.get("output_path", f"packages/{key}")).strip("/"),
        source_paths=list(raw.get("source_paths") or []),
        file_patterns=list(raw.get("file_patterns") or default_patterns),
        icon=navigation.get("icon", "code"),
        nav_groups=list(navigation.get("groups") or []),
        types_file=raw.get("types_file"),
        jsdoc_file=raw.get("jsdoc_file"),
        strategy=raw.get("strategy"),
        aggregate=list(aggregate) if aggregate is not None else ["functions"],
        intro=raw.get("intro") or "",
        architecture=list(narrative.get("architecture") or []),
        patterns=list(narrative.get("patterns") or []),
        redirects=list(raw.get("redirects") or []),
    )


def get_package_config(config: dict[str, Any], key: str) -> PackageConfig:
    """Look up a package by key, exiting with the valid names when it is unknown."""
    packages = config.get("packages") or {}
    if key not in packages:
        available = ", ".join(sorted(packages)) or "(none configured)"
        msg = f"Unknown package: {key}. Available packages: {available}"
        raise SystemExit(msg)
    return package_from_dict(key, packages[key] or {}, config.get("default_file_patterns", []))
