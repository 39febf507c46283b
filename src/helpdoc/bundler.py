"""Module bundling.

Concatenates the loose script files of a module into one distributable
module file and hashes every input for change detection.

The bundler never loads what it writes. Callers that need the fresh
definitions call ``CommandHost.reload_module`` with the returned path.
"""

import fnmatch
import hashlib
import logging
from pathlib import Path

from helpdoc.errors import MalformedInputError, NotFoundError
from helpdoc.models import BundleResult

logger = logging.getLogger(__name__)

DEFAULT_SCRIPT_EXTENSION = "ps1"
DEFAULT_BUNDLE_EXTENSION = "psm1"


def hash_bytes(data: bytes) -> str:
    """Return the SHA-256 hex digest of ``data``."""
    return hashlib.sha256(data).hexdigest()


def list_sources(
    source_dir: Path,
    exclude: str | None = None,
    script_extension: str = DEFAULT_SCRIPT_EXTENSION,
) -> list[Path]:
    """List the script files of a source directory in listing order.

    Args:
        source_dir: Directory holding the scripts (not searched recursively)
        exclude: Glob matched against file names; matches are skipped
        script_extension: Extension of script files, without the dot

    Returns:
        Script paths sorted by file name, ignoring case like Get-ChildItem
    """
    sources = []
    scripts = Path(source_dir).glob(f"*.{script_extension}")
    for path in sorted(scripts, key=lambda p: (p.name.casefold(), p.name)):
        if not path.is_file():
            continue
        if exclude and fnmatch.fnmatch(path.name, exclude):
            logger.debug(f"Excluding {path.name}")
            continue
        sources.append(path)
    return sources


def bundle_module(
    module_name: str,
    source_dir: Path,
    output_dir: Path,
    exclude: str | None = None,
    script_extension: str = DEFAULT_SCRIPT_EXTENSION,
    bundle_extension: str = DEFAULT_BUNDLE_EXTENSION,
) -> BundleResult:
    """Bundle every script in ``source_dir`` into one module file.

    The output file ``<output_dir>/<module_name>.<bundle_extension>`` is
    overwritten without warning.

    Args:
        module_name: Name of the module (output file stem)
        source_dir: Directory holding the scripts
        output_dir: Directory receiving the bundle
        exclude: Glob matched against file names; matches are skipped
        script_extension: Extension of script files
        bundle_extension: Extension of the bundle file

    Returns:
        BundleResult with the ordered sources, written content, and hashes

    Raises:
        NotFoundError: If the source or output directory does not exist
        MalformedInputError: If a script is not valid UTF-8

    Example:
        >>> result = bundle_module("Tools", Path("src"), Path("out"), exclude="*.Tests.ps1")
        >>> print(result.output_path)
        out/Tools.psm1
    """
    source_dir = Path(source_dir)
    output_dir = Path(output_dir)

    if not source_dir.is_dir():
        raise NotFoundError(f"Source directory not found: {source_dir}")
    if not output_dir.is_dir():
        raise NotFoundError(f"Output directory not found: {output_dir}")

    sources = list_sources(source_dir, exclude, script_extension)

    hashes: dict[Path, str] = {}
    parts = []
    for source in sources:
        data = source.read_bytes()
        hashes[source] = hash_bytes(data)
        try:
            parts.append(data.decode("utf-8-sig"))
        except UnicodeDecodeError as e:
            raise MalformedInputError(f"Script is not valid UTF-8: {source}") from e

    content = "\n".join(parts)
    output_path = output_dir / f"{module_name}.{bundle_extension}"
    output_path.write_text(content, encoding="utf-8", newline="")

    logger.info(f"Bundled {len(sources)} file(s) into {output_path}")

    return BundleResult(
        output_path=output_path,
        sources=sources,
        content=content,
        hashes=hashes,
    )


__all__ = ["bundle_module", "hash_bytes", "list_sources"]
