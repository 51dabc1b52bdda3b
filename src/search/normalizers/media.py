"""Normalizers for video, game and music provider documents."""

from typing import Any

from collect.models import MatchCandidate

from .base import Normalizer

TMDB_IMAGE_BASE = "https://image.tmdb.org/t/p/w500"
IGDB_COVER_URL = "https://images.igdb.com/igdb/image/upload/t_cover_big/{image_id}.jpg"

MOVIE_GENRES = {
    28: "Action", 12: "Adventure", 16: "Animation", 35: "Comedy", 80: "Crime",
    99: "Documentary", 18: "Drama", 10751: "Family", 14: "Fantasy", 36: "History",
    27: "Horror", 10402: "Music", 9648: "Mystery", 10749: "Romance", 878: "Science Fiction",
    10770: "TV Movie", 53: "Thriller", 10752: "War", 37: "Western",
}  # fmt: skip

TV_GENRES = {
    10759: "Action & Adventure", 16: "Animation", 35: "Comedy", 80: "Crime",
    99: "Documentary", 18: "Drama", 10751: "Family", 10762: "Kids", 9648: "Mystery",
    10763: "News", 10764: "Reality", 10765: "Sci-Fi & Fantasy", 10766: "Soap",
    10767: "Talk", 10768: "War & Politics", 37: "Western",
}  # fmt: skip


class TmdbNormalizer(Normalizer):
    """Normalize TMDB multi-search results (movies and TV shows).

    Search results carry no director, so `creator` is empty.
    """

    def normalize(self, document: dict[str, Any]) -> MatchCandidate:
        self._require(document, "id")
        media_type = document.get("media_type", "movie")
        if media_type not in ("movie", "tv"):
            raise ValueError(f"Unsupported TMDB media type: {media_type}")

        if media_type == "movie":
            title = document.get("title")
            original_title = document.get("original_title", "")
            release_date = document.get("release_date", "")
            genre_names = MOVIE_GENRES
        else:
            title = document.get("name")
            original_title = document.get("original_name", "")
            release_date = document.get("first_air_date", "")
            genre_names = TV_GENRES
        if not title:
            raise ValueError("TMDB result has no title")

        poster = document.get("poster_path")
        return MatchCandidate(
            external_id=f"tmdb-{media_type}-{document['id']}",
            external_source="tmdb",
            title=title,
            creator="",
            cover_image_url=f"{TMDB_IMAGE_BASE}{poster}" if poster else None,
            metadata={
                "subtype": media_type,
                "originalTitle": original_title,
                "releaseDate": release_date,
                "overview": document.get("overview", ""),
                "voteAverage": document.get("vote_average", 0),
                "genres": [genre_names.get(g, "Other") for g in document.get("genre_ids", [])],
            },
        )


class SpotifyNormalizer(Normalizer):
    """Normalize Spotify album objects."""

    def normalize(self, document: dict[str, Any]) -> MatchCandidate:
        self._require(document, "id", "name")
        artists = [a["name"] for a in document.get("artists", []) if a.get("name")]

        return MatchCandidate(
            external_id=f"spotify-{document['id']}",
            external_source="spotify",
            title=document["name"],
            creator=artists[0] if artists else "",
            cover_image_url=self._safe_get(document, "images", 0, "url"),
            metadata={
                "releaseDate": document.get("release_date", ""),
                "albumType": document.get("album_type", ""),
                "totalTracks": document.get("total_tracks"),
                "artists": artists,
                "spotifyUrl": self._safe_get(document, "external_urls", "spotify", default=""),
            },
        )


class IgdbNormalizer(Normalizer):
    """Normalize IGDB game objects."""

    def normalize(self, document: dict[str, Any]) -> MatchCandidate:
        self._require(document, "id", "name")

        companies = document.get("involved_companies", [])
        developer = next(
            (c["company"]["name"] for c in companies if c.get("developer") and c.get("company")), ""
        )
        publisher = next(
            (c["company"]["name"] for c in companies if c.get("publisher") and c.get("company")), ""
        )
        image_id = self._safe_get(document, "cover", "image_id")
        # IGDB ratings are on a 0-100 scale
        rating = (
            document.get("total_rating")
            or document.get("aggregated_rating")
            or document.get("rating")
        )

        return MatchCandidate(
            external_id=f"igdb-{document['id']}",
            external_source="igdb",
            title=document["name"],
            creator=developer or publisher,
            cover_image_url=IGDB_COVER_URL.format(image_id=image_id) if image_id else None,
            metadata={
                "summary": document.get("summary", ""),
                "releaseDate": self._date_from_timestamp(document.get("first_release_date")),
                "genres": [g["name"] for g in document.get("genres", [])],
                "platforms": [p["name"] for p in document.get("platforms", [])],
                "rating": round(rating) if rating else None,
                "developer": developer,
                "publisher": publisher,
            },
        )
