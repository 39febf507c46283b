"""HTML page generation for individual commands.

Each page is ``header + body + footer``. The body is built with plain
string formatting in a fixed order: name, synopsis, syntax, description,
parameters, examples. Only the syntax line and parameter names are
HTML-escaped.
"""

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from helpdoc.errors import HostError, MalformedInputError, NotFoundError
from helpdoc.help_extractor import HELP_WIDTH, HelpExtractor
from helpdoc.host import CommandHost, help_extract
from helpdoc.models import ExampleRecord, ExtractedFields, PageResult, ParameterRecord

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


class CommandPageRenderer:
    """Renders one HTML page per command."""

    def __init__(
        self,
        host: CommandHost,
        header: str = "",
        footer: str = "",
        extractor: HelpExtractor | None = None,
        help_width: int = HELP_WIDTH,
    ):
        """Initialize renderer.

        Args:
            host: Host used to resolve commands and fetch help text
            header: Raw text placed before every page body
            footer: Raw text placed after every page body
            extractor: Help extractor (defaults to HelpExtractor())
            help_width: Width the host renders help text at
        """
        self.host = host
        self.header = header
        self.footer = footer
        self.extractor = extractor or HelpExtractor()
        self.help_width = help_width

    def render(self, fields: ExtractedFields) -> str:
        """Render a complete HTML document from extracted fields."""
        sections = [
            f"<h1>{fields.name}</h1>",
            f"<p>{fields.synopsis}</p>",
            "<h2>Syntax</h2>",
            f"<pre>{fields.html_syntax}</pre>",
            "<h2>Description</h2>",
            f"<p>{fields.description}</p>",
        ]

        if fields.parameters:
            sections.append("<h2>Parameters</h2>")
            sections.extend(self._render_parameter(p) for p in fields.parameters)

        if fields.examples:
            sections.extend(self._render_example(e) for e in fields.examples)

        body = "\n".join(sections) + "\n"
        return f"{self.header}{body}{self.footer}"

    def _render_parameter(self, parameter: ParameterRecord) -> str:
        rows = [
            ("Description", parameter.description),
            ("Required?", parameter.required),
            ("Position?", parameter.position),
            ("Default value", parameter.default_value),
            ("Accept pipeline input?", parameter.pipeline_input),
            ("Accept wildcard characters?", parameter.wildcards),
        ]
        lines = [f"<h3>{parameter.html_name}</h3>", "<table>"]
        lines.extend(f"<tr><th>{label}</th><td>{value}</td></tr>" for label, value in rows)
        lines.append("</table>")
        return "\n".join(lines)

    def _render_example(self, example: ExampleRecord) -> str:
        return f"<h2>Example {example.number}</h2>\n<pre>{example.body}</pre>"

    def extract_command(self, command_name: str) -> ExtractedFields:
        """Fetch and extract the help text of one command.

        Raises:
            MalformedInputError: If the help extract cannot be decoded
            HostError: If the host fails to produce the help text
        """
        with help_extract(self.host, command_name, self.help_width) as path:
            text = self.extractor.read_document(path)
        return self.extractor.extract(text)

    def render_command(self, command_name: str, output_dir: Path) -> Path:
        """Render one command page to ``<output_dir>/<command_name>.html``.

        Returns:
            Path to the written page
        """
        fields = self.extract_command(command_name)
        output_path = Path(output_dir) / f"{command_name}.html"
        output_path.write_text(self.render(fields), encoding="utf-8")
        logger.debug(f"Wrote {output_path}")
        return output_path

    def resolve_commands(self, name: str, exclude: Iterable[str] = ()) -> list[str]:
        """Resolve a command or module name to the commands to render.

        Raises:
            NotFoundError: If ``name`` is neither a command nor a module
        """
        if self.host.command_exists(name):
            return [name]
        if self.host.module_exists(name):
            excluded = set(exclude)
            return [c for c in self.host.list_module_commands(name) if c not in excluded]
        raise NotFoundError(f"No command or module named '{name}'")

    def render_all(
        self,
        name: str,
        output_dir: Path,
        exclude: Iterable[str] = (),
        progress: ProgressCallback | None = None,
        fail_fast: bool = False,
    ) -> list[PageResult]:
        """Render a command page, or one page for every command of a module.

        A failing command is logged and recorded in its PageResult while the
        rest of the batch continues, unless ``fail_fast`` is set.

        Args:
            name: Command or module name
            output_dir: Directory receiving the pages
            exclude: Command names to skip when ``name`` is a module
            progress: Called as ``progress(index, total, command)`` before each page
            fail_fast: Re-raise the first per-command failure

        Returns:
            One PageResult per rendered command, in enumeration order

        Raises:
            NotFoundError: If ``name`` is unknown or ``output_dir`` is missing

        Example:
            >>> renderer = CommandPageRenderer(PowerShellHost(), header, footer)
            >>> results = renderer.render_all("Tools", Path("docs/cmdlets"))
            >>> failed = [r for r in results if not r.success]
        """
        output_dir = Path(output_dir)
        if not output_dir.is_dir():
            raise NotFoundError(f"Output directory not found: {output_dir}")

        commands = self.resolve_commands(name, exclude)
        total = len(commands)
        results = []

        for index, command in enumerate(commands, start=1):
            if progress:
                progress(index, total, command)
            try:
                output_path = self.render_command(command, output_dir)
                results.append(PageResult(command_name=command, output_path=output_path))
            except (MalformedInputError, HostError) as e:
                if fail_fast:
                    raise
                logger.warning(f"Skipping {command}: {e}")
                results.append(PageResult(command_name=command, error=str(e)))

        logger.info(f"Rendered {sum(r.success for r in results)}/{total} command page(s)")
        return results


__all__ = ["CommandPageRenderer", "ProgressCallback"]
