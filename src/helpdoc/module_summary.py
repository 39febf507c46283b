"""Module summary pages.

Lists every command of a module with its synopsis, in HTML (linking to
``cmdlets/<name>.html``) or Markdown (linking to an absolute
documentation URL). Commands still being written can be flagged with an
IN PROGRESS marker.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from helpdoc.command_pages import ProgressCallback
from helpdoc.errors import HostError, MalformedInputError, NotFoundError
from helpdoc.help_extractor import HELP_WIDTH, HelpExtractor
from helpdoc.host import CommandHost, help_extract
from helpdoc.models import ModuleEntry

logger = logging.getLogger(__name__)

IN_PROGRESS_MARKER = "IN PROGRESS"


def _intro(module: str, count: int) -> str:
    noun = "command" if count == 1 else "commands"
    return f"The {module} module contains {count} {noun}:"


class ModuleSummaryRenderer:
    """Renders module-level summary pages."""

    def __init__(
        self,
        host: CommandHost,
        extractor: HelpExtractor | None = None,
        help_width: int = HELP_WIDTH,
    ):
        self.host = host
        self.extractor = extractor or HelpExtractor()
        self.help_width = help_width

    def collect(
        self,
        module: str,
        exclude: Iterable[str] = (),
        progress: ProgressCallback | None = None,
        fail_fast: bool = False,
    ) -> list[ModuleEntry]:
        """Collect the name and synopsis of every non-excluded command.

        A command whose help cannot be fetched or decoded is logged and left
        out of the summary, unless ``fail_fast`` is set.

        Args:
            module: Module name
            exclude: Command names to leave out
            progress: Called as ``progress(index, total, command)`` before each command
            fail_fast: Re-raise the first per-command failure

        Raises:
            NotFoundError: If the module is unknown
        """
        if not self.host.module_exists(module):
            raise NotFoundError(f"Module not found: {module}")

        excluded = set(exclude)
        commands = [c for c in self.host.list_module_commands(module) if c not in excluded]
        total = len(commands)
        entries = []

        for index, command in enumerate(commands, start=1):
            if progress:
                progress(index, total, command)
            try:
                with help_extract(self.host, command, self.help_width) as path:
                    text = self.extractor.read_document(path)
            except (MalformedInputError, HostError) as e:
                if fail_fast:
                    raise
                logger.warning(f"Leaving {command} out of the {module} summary: {e}")
                continue
            entries.append(ModuleEntry(name=command, synopsis=self.extractor.extract_synopsis(text)))

        logger.debug(f"Collected {len(entries)}/{total} command(s) from {module}")
        return entries

    def render_html(
        self, module: str, entries: list[ModuleEntry], in_progress: Iterable[str] = ()
    ) -> str:
        """Render the HTML summary list."""
        flagged = set(in_progress)
        lines = [f"<p>{_intro(module, len(entries))}</p>", "<ul>"]
        for entry in entries:
            marker = f"<strong>{IN_PROGRESS_MARKER}</strong> " if entry.name in flagged else ""
            lines.append(
                f'<li>{marker}<a href="cmdlets/{entry.name}.html">{entry.name}</a>'
                f" - {entry.synopsis}</li>"
            )
        lines.append("</ul>")
        return "\n".join(lines) + "\n"

    def render_markdown(
        self,
        module: str,
        entries: list[ModuleEntry],
        base_url: str,
        in_progress: Iterable[str] = (),
    ) -> str:
        """Render the Markdown summary list. Nothing is escaped."""
        flagged = set(in_progress)
        base_url = base_url.rstrip("/")
        lines = [f"# {module}", "", _intro(module, len(entries)), ""]
        for entry in entries:
            marker = f"**{IN_PROGRESS_MARKER}** " if entry.name in flagged else ""
            lines.append(
                f"* {marker}[{entry.name}]({base_url}/{entry.name}.html) - {entry.synopsis}"
            )
        return "\n".join(lines) + "\n"

    def write_html(
        self,
        module: str,
        output_dir: Path,
        exclude: Iterable[str] = (),
        in_progress: Iterable[str] = (),
        file_name: str | None = None,
        progress: ProgressCallback | None = None,
        fail_fast: bool = False,
    ) -> Path:
        """Write ``<output_dir>/<module>.html`` (or ``file_name``).

        Raises:
            NotFoundError: If the module or output directory is unknown
        """
        output_path = self._output_path(output_dir, file_name or f"{module}.html")
        entries = self.collect(module, exclude, progress, fail_fast)
        output_path.write_text(self.render_html(module, entries, in_progress), encoding="utf-8")
        logger.info(f"Wrote {output_path}")
        return output_path

    def write_markdown(
        self,
        module: str,
        output_dir: Path,
        base_url: str,
        exclude: Iterable[str] = (),
        in_progress: Iterable[str] = (),
        file_name: str | None = None,
        progress: ProgressCallback | None = None,
        fail_fast: bool = False,
    ) -> Path:
        """Write ``<output_dir>/README.md`` (or ``file_name``).

        Raises:
            NotFoundError: If the module or output directory is unknown
        """
        output_path = self._output_path(output_dir, file_name or "README.md")
        entries = self.collect(module, exclude, progress, fail_fast)
        output_path.write_text(
            self.render_markdown(module, entries, base_url, in_progress), encoding="utf-8"
        )
        logger.info(f"Wrote {output_path}")
        return output_path

    def _output_path(self, output_dir: Path, file_name: str) -> Path:
        output_dir = Path(output_dir)
        if not output_dir.is_dir():
            raise NotFoundError(f"Output directory not found: {output_dir}")
        return output_dir / file_name


__all__ = ["IN_PROGRESS_MARKER", "ModuleSummaryRenderer"]
