"""helpdoc - documentation builder for command modules

Bundles a module's loose script files into one module file, then scrapes
each command's help text into HTML pages and module summaries.

Public API:
    - bundle_module: Concatenate and hash script files
    - HelpExtractor: Scrape help text into ExtractedFields
    - CommandPageRenderer: Render per-command HTML pages
    - ModuleSummaryRenderer: Render module summaries (HTML, Markdown)
    - PowerShellHost: CommandHost backed by pwsh
"""

from helpdoc.bundler import bundle_module
from helpdoc.command_pages import CommandPageRenderer
from helpdoc.errors import (
    ConfigError,
    HelpDocError,
    HostError,
    MalformedInputError,
    NotFoundError,
)
from helpdoc.help_extractor import HelpExtractor
from helpdoc.host import CommandHost, PowerShellHost, help_extract
from helpdoc.models import (
    BundleResult,
    ExampleRecord,
    ExtractedFields,
    ModuleEntry,
    PageResult,
    ParameterRecord,
)
from helpdoc.module_summary import ModuleSummaryRenderer

__version__ = "0.1.0"

__all__ = [
    "BundleResult",
    "CommandHost",
    "CommandPageRenderer",
    "ConfigError",
    "ExampleRecord",
    "ExtractedFields",
    "HelpDocError",
    "HelpExtractor",
    "HostError",
    "MalformedInputError",
    "ModuleEntry",
    "ModuleSummaryRenderer",
    "NotFoundError",
    "PageResult",
    "ParameterRecord",
    "PowerShellHost",
    "__version__",
    "bundle_module",
    "help_extract",
]
