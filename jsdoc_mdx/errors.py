"""Exception types raised while generating API documentation."""


class DocsGenerationError(Exception):
    """Base class for documentation generation failures."""


class SourceParseError(DocsGenerationError):
    """A source file could not be tokenized or parsed."""

    def __init__(self, message: str, file_name: str = "", line: int = 0) -> None:
        """Record where parsing stopped."""
        self.file_name = file_name
        self.line = line
        location = f"{file_name}:{line}" if file_name else f"line {line}"
        super().__init__(f"{location}: {message}")


class NavigationError(DocsGenerationError):
    """The navigation manifest could not be read or decoded."""
