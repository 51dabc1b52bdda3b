"""LLM-backed extraction of consumed content from text and web pages."""

import json
from typing import Any

from openai import OpenAI, OpenAIError

from collect.errors import ExtractionError
from collect.interfaces import ExtractionService
from collect.models import ContentType, ExtractedItem, ExtractionResult
from common.logger import get_logger

from .url_fetcher import UrlFetcher

logger = get_logger(__name__)

SYSTEM_PROMPT = """You extract works of media a person has consumed from a document.

Return a JSON object {"items": [...]} where every item has:
- "type": one of "BOOK", "VIDEO", "GAME", "MUSIC", "CERTIFICATE"
- "title": the title as written in the document
- "titleLocalized": the title translated into the document's language, if different
- "creator": author, director, developer or artist, if known
- "creatorLocalized": the creator's name in the document's language, if different
- "review": what the person said about the work, quoted where possible
- "rating": the person's rating from 0 to 5 in steps of 0.5, only if stated
- "sourceUrl": a URL cited for this mention, if any

One work per item. Skip vague mentions that name no specific work.
Return {"items": []} if nothing qualifies."""


def _text_or_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def coerce_rating(value: Any) -> float | None:
    """Clamp a model-supplied rating to 0-5 and round it to the nearest 0.5."""
    try:
        rating = float(value)
    except (TypeError, ValueError):
        return None
    rating = min(max(rating, 0.0), 5.0)
    return round(rating * 2) / 2


def item_from_payload(payload: Any) -> ExtractedItem | None:
    """Build an ExtractedItem from one model-produced object.

    Returns:
        The item, or None when the object has no usable type or title
    """
    if not isinstance(payload, dict):
        return None

    raw_type = str(payload.get("type", "")).strip().upper()
    title = _text_or_none(payload.get("title"))
    if raw_type not in {t.value for t in ContentType} or not title:
        logger.warning(f"Dropping extracted item with type={raw_type!r} title={title!r}")
        return None

    return ExtractedItem(
        type=ContentType(raw_type),
        title=title,
        title_localized=_text_or_none(payload.get("titleLocalized")),
        creator=_text_or_none(payload.get("creator")),
        creator_localized=_text_or_none(payload.get("creatorLocalized")),
        review=_text_or_none(payload.get("review")),
        rating=coerce_rating(payload.get("rating")) if payload.get("rating") is not None else None,
        source_url=_text_or_none(payload.get("sourceUrl")),
    )


class OpenAIExtractionService(ExtractionService):
    """Extraction service backed by the OpenAI chat completions API.

    Every failure, including a missing API key, is raised as ExtractionError
    with the underlying message.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o-mini",
        client: OpenAI | None = None,
        fetcher: UrlFetcher | None = None,
    ):
        """Initialize extraction service.

        Args:
            api_key: OpenAI API key (ignored when `client` is given)
            model: Chat model name
            client: Preconfigured OpenAI client
            fetcher: Page fetcher for URL input
        """
        self.model = model
        self.client = client or (OpenAI(api_key=api_key) if api_key else None)
        self.fetcher = fetcher or UrlFetcher()

    @classmethod
    def from_env(cls) -> "OpenAIExtractionService":
        from common.env import env

        return cls(api_key=env.openai_api_key(), model=env.openai_model())

    def extract_from_text(self, text: str, hint: str | None = None) -> ExtractionResult:
        return ExtractionResult(items=self._extract(text, hint))

    def extract_from_url(self, url: str, hint: str | None = None) -> ExtractionResult:
        text = self.fetcher.fetch(url)
        return ExtractionResult(items=self._extract(text, hint), source_url=url)

    def _extract(self, text: str, hint: str | None) -> list[ExtractedItem]:
        if self.client is None:
            raise ExtractionError("OPENAI_API_KEY is not set")

        subject = f"The person is {hint}.\n\n" if hint else ""
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": f"{subject}Document:\n{text}"},
                ],
                response_format={"type": "json_object"},
                temperature=0,
            )
        except OpenAIError as e:
            raise ExtractionError(str(e)) from e

        content = response.choices[0].message.content or ""
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ExtractionError(f"Extraction returned invalid JSON: {e}") from e

        payloads = data.get("items") if isinstance(data, dict) else None
        if not isinstance(payloads, list):
            raise ExtractionError("Extraction response has no 'items' list")

        items = [item for item in map(item_from_payload, payloads) if item is not None]
        logger.info(f"Extracted {len(items)} item(s) ({len(payloads) - len(items)} dropped)")
        return items
