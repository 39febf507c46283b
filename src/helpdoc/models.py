"""Data models for the helpdoc pipelines.

Every record here is built once to produce an output artifact and then
discarded. Nothing is cached across invocations.
"""

import html
import json
from dataclasses import dataclass, field
from pathlib import Path


def escape_html(text: str) -> str:
    """Escape markup characters for HTML output.

    `<`, `>` and `&` become entities so a syntax line such as
    `Get-Foo <Name> [-Path <String>]` renders literally. Quotes are left alone.
    """
    return html.escape(text, quote=False)


@dataclass
class ParameterRecord:
    """One parameter block from a PARAMETERS section.

    All values are kept as text, exactly as the help formatter printed them.

    Attributes:
        name: Parameter name without the leading dash (e.g., "Name")
        type_hint: Type shown next to the name (e.g., "<String>"), may be empty
        description: First description line
        required: Value of "Required?"
        position: Value of "Position?"
        default_value: Value of "Default value", empty when absent
        pipeline_input: Value of "Accept pipeline input?"
        wildcards: Value of "Accept wildcard characters?"
    """

    name: str
    type_hint: str = ""
    description: str = ""
    required: str = ""
    position: str = ""
    default_value: str = ""
    pipeline_input: str = ""
    wildcards: str = ""

    @property
    def display_name(self) -> str:
        """Return the name as the help formatter shows it (e.g., "-Name <String>")."""
        return f"-{self.name} {self.type_hint}".rstrip()

    @property
    def html_name(self) -> str:
        """Return the display name escaped for HTML."""
        return escape_html(self.display_name)


@dataclass
class ExampleRecord:
    """One numbered example.

    Attributes:
        number: Example number as it appears in the help text (never renumbered)
        body: Example text, trimmed of surrounding whitespace
    """

    number: int
    body: str


@dataclass
class ExtractedFields:
    """Fields scraped from one command's help text.

    Scalar fields are stored unescaped; use ``html_syntax`` for HTML output.
    """

    name: str = ""
    synopsis: str = ""
    syntax: str = ""
    description: str = ""
    parameters: list[ParameterRecord] = field(default_factory=list)
    examples: list[ExampleRecord] = field(default_factory=list)

    @property
    def html_syntax(self) -> str:
        """Return the syntax line escaped for HTML."""
        return escape_html(self.syntax)


@dataclass
class ModuleEntry:
    """A command listed on a module summary page."""

    name: str
    synopsis: str = ""


@dataclass
class BundleResult:
    """Result of bundling a module's script files.

    Attributes:
        output_path: Path of the written bundle
        sources: Included source files, in concatenation order
        content: Concatenated text that was written
        hashes: SHA-256 hex digest of each source file's bytes, keyed by path
    """

    output_path: Path
    sources: list[Path] = field(default_factory=list)
    content: str = ""
    hashes: dict[Path, str] = field(default_factory=dict)

    def write_manifest(self, path: Path) -> Path:
        """Write the hash map as JSON keyed by file name.

        Args:
            path: Destination of the manifest

        Returns:
            The manifest path
        """
        manifest = {source.name: digest for source, digest in self.hashes.items()}
        path = Path(path)
        path.write_text(json.dumps(manifest, indent=2, sort_keys=True) + "\n", encoding="utf-8")
        return path


@dataclass
class PageResult:
    """Result of rendering one command page.

    Attributes:
        command_name: Command that was rendered
        output_path: Path to the written page, None on failure
        error: Error message if rendering failed
    """

    command_name: str
    output_path: Path | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        """Whether the page was written."""
        return self.error is None


__all__ = [
    "BundleResult",
    "ExampleRecord",
    "ExtractedFields",
    "ModuleEntry",
    "PageResult",
    "ParameterRecord",
    "escape_html",
]
