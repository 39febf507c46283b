"""Help text extraction.

This module scrapes the help text the host prints for a command
(``Get-Help <command> -Full`` at a fixed width) into an ExtractedFields
record. It is pattern matching over a known layout, not a full parser.

Every assumption about that layout lives in HelpExtractor: the header
tokens, the parameter field labels, the example anchors, and the
block boundaries. Replace the class to change data source.

Layout assumed (500 columns, so every paragraph is a single line):

    NAME
        Get-Foo

    SYNOPSIS
        Does the thing.

    PARAMETERS
        -Name <String>
            The name.

            Required?                    true
            Position?                    1
            Default value
            Accept pipeline input?       false
            Accept wildcard characters?  false

        -------------------------- EXAMPLE 1 --------------------------

        PS C:\\> Get-Foo -Name bar
"""

import codecs
import logging
import re
from pathlib import Path

from helpdoc.errors import MalformedInputError
from helpdoc.models import ExampleRecord, ExtractedFields, ParameterRecord

logger = logging.getLogger(__name__)

# Width the extractor's line-based assumptions hold for
HELP_WIDTH = 500


class HelpExtractor:
    """Extracts ExtractedFields from raw help text.

    Matching is case-sensitive on header tokens. Missing sections yield
    empty values; extraction of decoded text never fails.
    """

    SCALAR_SECTIONS = {
        "name": "NAME",
        "synopsis": "SYNOPSIS",
        "syntax": "SYNTAX",
        "description": "DESCRIPTION",
    }

    PARAMETER_FIELDS = {
        "required": r"Required\?",
        "position": r"Position\?",
        "default_value": r"Default value",
        "pipeline_input": r"Accept pipeline input\?",
        "wildcards": r"Accept wildcard characters\?",
    }

    PARAMETERS_SECTION = re.compile(
        r"^PARAMETERS[ \t]*\n(?P<body>.*?)(?=^\S|\Z)", re.MULTILINE | re.DOTALL
    )
    PARAMETER_ANCHOR = re.compile(
        r"^[ \t]{0,4}-(?P<name>[A-Za-z][\w-]*)[ \t]*(?P<type>[^\n]*?)[ \t]*$", re.MULTILINE
    )
    COMMON_PARAMETERS = re.compile(r"^[ \t]*<CommonParameters>", re.MULTILINE)
    EXAMPLE_BLOCK = re.compile(
        r"^[ \t]*-+[ \t]*EXAMPLE[ \t]+(?P<number>\d+)[^\n]*\n"
        r"(?P<body>.*?)"
        r"(?=(?:^[ \t]*\n){3}|^[ \t]*-+[ \t]*EXAMPLE[ \t]+\d+|^\S|\Z)",
        re.MULTILINE | re.DOTALL,
    )

    def __init__(self) -> None:
        self._scalar_patterns = {
            key: re.compile(rf"^{header}[ \t]*\n(?:[ \t]*\n)*[ \t]+(\S[^\n]*)", re.MULTILINE)
            for key, header in self.SCALAR_SECTIONS.items()
        }
        self._field_patterns = {
            key: re.compile(rf"^[ \t]*{label}[ \t]*(?P<value>[^\n]*?)[ \t]*$", re.MULTILINE)
            for key, label in self.PARAMETER_FIELDS.items()
        }
        self._field_label = re.compile(
            r"^(?:" + "|".join(self.PARAMETER_FIELDS.values()) + r")"
        )

    def read_document(self, path: Path) -> str:
        """Read a help extract from disk and decode it.

        UTF-8 (with or without BOM) and BOM-marked UTF-16 are accepted.

        Args:
            path: Path to the extract written by the host

        Returns:
            Decoded help text

        Raises:
            MalformedInputError: If the file cannot be read or decoded
        """
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise MalformedInputError(f"Cannot read help extract {path}: {e}") from e

        try:
            if data.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
                return data.decode("utf-16")
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise MalformedInputError(f"Help extract {path} is not decodable text: {e}") from e

    def extract(self, text: str) -> ExtractedFields:
        """Extract every field from help text.

        Args:
            text: Raw help text for one command

        Returns:
            ExtractedFields; absent sections are empty

        Example:
            >>> fields = HelpExtractor().extract(help_text)
            >>> print(fields.synopsis)
            'Does the thing.'
        """
        text = self._normalize(text)
        return ExtractedFields(
            name=self._scalar(text, "name"),
            synopsis=self._scalar(text, "synopsis"),
            syntax=self._scalar(text, "syntax"),
            description=self._scalar(text, "description"),
            parameters=self._parameters(text),
            examples=self._examples(text),
        )

    def extract_synopsis(self, text: str) -> str:
        """Extract only the synopsis, unescaped."""
        return self._scalar(self._normalize(text), "synopsis")

    def _normalize(self, text: str) -> str:
        return text.replace("\r\n", "\n").replace("\r", "\n")

    def _scalar(self, text: str, key: str) -> str:
        match = self._scalar_patterns[key].search(text)
        return match.group(1).strip() if match else ""

    def _parameters(self, text: str) -> list[ParameterRecord]:
        section = self.PARAMETERS_SECTION.search(text)
        if not section:
            return []

        body = section.group("body")
        common = self.COMMON_PARAMETERS.search(body)
        if common:
            body = body[: common.start()]

        anchors = list(self.PARAMETER_ANCHOR.finditer(body))
        parameters = []
        for index, anchor in enumerate(anchors):
            # A block never runs past the next anchor
            end = anchors[index + 1].start() if index + 1 < len(anchors) else len(body)
            block = body[anchor.end() : end]
            parameters.append(
                ParameterRecord(
                    name=anchor.group("name"),
                    type_hint=anchor.group("type"),
                    description=self._parameter_description(block),
                    **{key: self._field(block, key) for key in self.PARAMETER_FIELDS},
                )
            )

        logger.debug(f"Extracted {len(parameters)} parameter(s)")
        return parameters

    def _parameter_description(self, block: str) -> str:
        for line in block.split("\n"):
            stripped = line.strip()
            if not stripped:
                continue
            if self._field_label.match(stripped):
                return ""
            return stripped
        return ""

    def _field(self, block: str, key: str) -> str:
        match = self._field_patterns[key].search(block)
        return match.group("value") if match else ""

    def _examples(self, text: str) -> list[ExampleRecord]:
        return [
            ExampleRecord(number=int(match.group("number")), body=match.group("body").strip())
            for match in self.EXAMPLE_BLOCK.finditer(text)
        ]


__all__ = ["HELP_WIDTH", "HelpExtractor"]
