"""Turn raw input into a working list of extracted items.

Three input forms are accepted:

- ``json``: a JSON array written by hand or by an external assistant
  (see ``collect.prompts``). Parsed and validated locally.
- ``text``: free text, handed to the extraction service.
- ``url``: a web page address, handed to the extraction service.
"""

import json
import re
from enum import Enum
from typing import Any

from common.logger import get_logger

from .errors import ValidationError
from .interfaces import ExtractionService
from .models import STRUCTURED_INPUT_TYPES, ContentType, ExtractedItem, ExtractionResult

logger = get_logger(__name__)

CODE_BLOCK_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
ARRAY_PATTERN = re.compile(r"\[[\s\S]*\]")
# "Title(Creator)" with the parenthetical anchored to the end of the string
TITLE_CREATOR_PATTERN = re.compile(r"^(.+?)\s*\(([^)]+)\)\s*$")

# Optional string fields of a structured element
TEXT_FIELDS = ("body", "source")


class InputMode(str, Enum):
    """Raw input forms."""

    JSON = "json"
    TEXT = "text"
    URL = "url"


def split_title_creator(raw_title: str) -> tuple[str, str | None]:
    """Split a combined "Title(Creator)" string.

    Args:
        raw_title: Title, optionally followed by a parenthesised creator

    Returns:
        Tuple of (title, creator); creator is None without a trailing parenthetical

    Example:
        >>> split_title_creator("Parasite (Bong Joon-ho)")
        ('Parasite', 'Bong Joon-ho')
        >>> split_title_creator("Parasite")
        ('Parasite', None)
    """
    match = TITLE_CREATOR_PATTERN.match(raw_title)
    if not match:
        return raw_title.strip(), None
    return match.group(1).strip(), match.group(2).strip()


def _extract_array_text(raw: str) -> str:
    text = raw.strip()

    # Assistants often wrap the array in a markdown code block
    code_block = CODE_BLOCK_PATTERN.search(text)
    if code_block:
        text = code_block.group(1).strip()

    array_match = ARRAY_PATTERN.search(text)
    if not array_match:
        raise ValidationError("Input is not a valid JSON array")
    return array_match.group(0)


def _has_valid_type(element: Any) -> bool:
    if not isinstance(element, dict):
        return False
    return element.get("type") in {t.value for t in STRUCTURED_INPUT_TYPES}


def parse_structured(raw: str) -> list[ExtractedItem]:
    """Parse a JSON array of {type, title, body, source} objects.

    Args:
        raw: JSON text, optionally wrapped in a markdown code block or
             surrounded by commentary

    Returns:
        Extracted items in input order

    Raises:
        ValidationError: If the payload is not a JSON array, is empty, or has
            elements without a valid type or title, or with a non-text body or
            source (positions are 1-based)
    """
    try:
        parsed = json.loads(_extract_array_text(raw))
    except json.JSONDecodeError as e:
        raise ValidationError(f"Input is not a valid JSON array: {e}") from e

    if not isinstance(parsed, list):
        raise ValidationError("Input must be a JSON array")
    if not parsed:
        raise ValidationError("The JSON array contains no items")

    invalid_types = [i + 1 for i, element in enumerate(parsed) if not _has_valid_type(element)]
    if invalid_types:
        allowed = "/".join(t.value for t in STRUCTURED_INPUT_TYPES)
        positions = ", ".join(str(p) for p in invalid_types)
        raise ValidationError(
            f"Item(s) {positions} have no valid type (one of {allowed} is required)",
            positions=invalid_types,
        )

    missing_titles = [
        i + 1
        for i, element in enumerate(parsed)
        if not isinstance(element.get("title"), str) or not element["title"].strip()
    ]
    if missing_titles:
        positions = ", ".join(str(p) for p in missing_titles)
        raise ValidationError(f"Item(s) {positions} have no title", positions=missing_titles)

    non_text = [
        i + 1
        for i, element in enumerate(parsed)
        if any(
            element.get(field) is not None and not isinstance(element[field], str)
            for field in TEXT_FIELDS
        )
    ]
    if non_text:
        positions = ", ".join(str(p) for p in non_text)
        raise ValidationError(
            f"Item(s) {positions} have a body or source that is not text", positions=non_text
        )

    items = []
    for element in parsed:
        title, creator = split_title_creator(element["title"])
        body = element.get("body") or ""
        items.append(
            ExtractedItem(
                type=ContentType(element["type"]),
                title=title,
                title_localized=title,
                creator=creator,
                creator_localized=creator,
                review=body.replace("\\n", "\n"),
                source_url=element.get("source") or None,
            )
        )

    logger.debug(f"Parsed {len(items)} item(s) from structured input")
    return items


def parse_input(
    raw: str,
    mode: InputMode | str,
    extractor: ExtractionService | None = None,
    hint: str | None = None,
) -> ExtractionResult:
    """Parse raw input of any mode into extracted items.

    Args:
        raw: JSON text, free text or a URL depending on `mode`
        mode: Input form
        extractor: Extraction service (required for text and URL modes)
        hint: Name of the person whose consumption is described

    Returns:
        ExtractionResult; `source_url` is set for URL input

    Raises:
        ValidationError: Malformed structured input or empty raw input
        ExtractionError: Reported by the extraction service
    """
    mode = InputMode(mode)
    if not raw.strip():
        raise ValidationError("Input is empty")

    if mode == InputMode.JSON:
        return ExtractionResult(items=parse_structured(raw))

    if extractor is None:
        raise ValueError(f"An extraction service is required for {mode.value} input")

    if mode == InputMode.URL:
        return extractor.extract_from_url(raw.strip(), hint)
    return extractor.extract_from_text(raw, hint)
