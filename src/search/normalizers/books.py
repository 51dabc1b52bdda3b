"""Normalizers for book provider documents (Google Books, Open Library)."""

from typing import Any

from collect.models import MatchCandidate

from .base import Normalizer

OPENLIBRARY_COVER_URL = "https://covers.openlibrary.org/b/id/{cover_id}-L.jpg"


class GoogleBooksNormalizer(Normalizer):
    """Normalize Google Books volume resources."""

    def normalize(self, document: dict[str, Any]) -> MatchCandidate:
        self._require(document, "id")
        info = document.get("volumeInfo", {})
        if not info.get("title"):
            raise ValueError("Google Books volume has no title")

        title = info["title"]
        if info.get("subtitle"):
            title = f"{title}: {info['subtitle']}"

        authors = info.get("authors", [])
        return MatchCandidate(
            external_id=f"googlebooks-{document['id']}",
            external_source="googlebooks",
            title=title,
            creator=", ".join(authors),
            cover_image_url=self._cover_url(info.get("imageLinks", {})),
            metadata={
                "publisher": info.get("publisher", ""),
                "publishDate": info.get("publishedDate", ""),
                "isbn": self._isbn(info.get("industryIdentifiers", [])),
                "description": info.get("description", ""),
                "pageCount": info.get("pageCount"),
                "categories": info.get("categories", []),
                "authors": authors,
            },
        )

    def _isbn(self, identifiers: list[dict[str, str]]) -> str:
        """Prefer ISBN-13 over ISBN-10."""
        for wanted in ("ISBN_13", "ISBN_10"):
            for identifier in identifiers:
                if identifier.get("type") == wanted:
                    return identifier.get("identifier", "")
        return ""

    def _cover_url(self, image_links: dict[str, str]) -> str | None:
        for size in ("extraLarge", "large", "medium", "small", "thumbnail", "smallThumbnail"):
            url = image_links.get(size)
            if url:
                return "https://" + url[len("http://") :] if url.startswith("http://") else url
        return None


class OpenLibraryNormalizer(Normalizer):
    """Normalize Open Library search.json documents."""

    def normalize(self, document: dict[str, Any]) -> MatchCandidate:
        self._require(document, "key", "title")

        # '/works/OL45804W' -> 'OL45804W'
        work_id = document["key"].rstrip("/").split("/")[-1]
        authors = document.get("author_name", [])
        cover_id = document.get("cover_i")

        year = document.get("first_publish_year")
        return MatchCandidate(
            external_id=f"openlibrary-{work_id}",
            external_source="openlibrary",
            title=document["title"],
            creator=", ".join(authors),
            cover_image_url=OPENLIBRARY_COVER_URL.format(cover_id=cover_id) if cover_id else None,
            metadata={
                "publisher": self._safe_get(document, "publisher", 0, default=""),
                "publishDate": str(year) if year else "",
                "isbn": self._isbn(document.get("isbn", [])),
                "authors": authors,
            },
        )

    def _isbn(self, isbns: list[str]) -> str:
        for isbn in isbns:
            if len(isbn) == 13:
                return isbn
        return isbns[0] if isbns else ""
