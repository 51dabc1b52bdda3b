"""Tests for provider response normalizers."""

import pytest

from search.normalizers.books import GoogleBooksNormalizer, OpenLibraryNormalizer
from search.normalizers.media import IgdbNormalizer, SpotifyNormalizer, TmdbNormalizer


class TestGoogleBooksNormalizer:
    """Tests for GoogleBooksNormalizer."""

    @pytest.fixture
    def volume(self):
        return {
            "id": "abc123",
            "volumeInfo": {
                "title": "Dune",
                "subtitle": "Deluxe Edition",
                "authors": ["Frank Herbert"],
                "publisher": "Ace",
                "publishedDate": "2019-10-01",
                "industryIdentifiers": [
                    {"type": "ISBN_10", "identifier": "0593099320"},
                    {"type": "ISBN_13", "identifier": "9780593099322"},
                ],
                "imageLinks": {"thumbnail": "http://books.google.com/cover.jpg"},
                "pageCount": 688,
            },
        }

    def test_normalize(self, volume):
        candidate = GoogleBooksNormalizer().normalize(volume)

        assert candidate.external_id == "googlebooks-abc123"
        assert candidate.external_source == "googlebooks"
        assert candidate.title == "Dune: Deluxe Edition"
        assert candidate.creator == "Frank Herbert"
        assert candidate.cover_image_url == "https://books.google.com/cover.jpg"
        assert candidate.metadata["isbn"] == "9780593099322"
        assert candidate.metadata["publisher"] == "Ace"
        assert candidate.metadata["pageCount"] == 688

    def test_missing_title(self):
        with pytest.raises(ValueError):
            GoogleBooksNormalizer().normalize({"id": "x", "volumeInfo": {}})


class TestOpenLibraryNormalizer:
    def test_normalize(self):
        document = {
            "key": "/works/OL893415W",
            "title": "Dune",
            "author_name": ["Frank Herbert"],
            "first_publish_year": 1965,
            "publisher": ["Chilton Books", "Ace"],
            "isbn": ["0441013597", "9780441013593"],
            "cover_i": 11481354,
        }

        candidate = OpenLibraryNormalizer().normalize(document)

        assert candidate.external_id == "openlibrary-OL893415W"
        assert candidate.creator == "Frank Herbert"
        assert candidate.cover_image_url == "https://covers.openlibrary.org/b/id/11481354-L.jpg"
        assert candidate.metadata == {
            "publisher": "Chilton Books",
            "publishDate": "1965",
            "isbn": "9780441013593",
            "authors": ["Frank Herbert"],
        }

    def test_missing_key(self):
        with pytest.raises(ValueError):
            OpenLibraryNormalizer().normalize({"title": "Dune"})


class TestTmdbNormalizer:
    """Tests for TmdbNormalizer."""

    def test_movie(self):
        candidate = TmdbNormalizer().normalize(
            {
                "id": 496243,
                "media_type": "movie",
                "title": "Parasite",
                "original_title": "기생충",
                "release_date": "2019-05-30",
                "poster_path": "/poster.jpg",
                "vote_average": 8.5,
                "genre_ids": [35, 53, 18, 1],
            }
        )

        assert candidate.external_id == "tmdb-movie-496243"
        assert candidate.creator == ""
        assert candidate.cover_image_url == "https://image.tmdb.org/t/p/w500/poster.jpg"
        assert candidate.metadata["originalTitle"] == "기생충"
        assert candidate.metadata["genres"] == ["Comedy", "Thriller", "Drama", "Other"]

    def test_tv(self):
        candidate = TmdbNormalizer().normalize(
            {"id": 1396, "media_type": "tv", "name": "Breaking Bad", "first_air_date": "2008-01-20"}
        )

        assert candidate.external_id == "tmdb-tv-1396"
        assert candidate.title == "Breaking Bad"
        assert candidate.metadata["subtype"] == "tv"
        assert candidate.metadata["releaseDate"] == "2008-01-20"
        assert candidate.cover_image_url is None

    def test_person_rejected(self):
        with pytest.raises(ValueError):
            TmdbNormalizer().normalize({"id": 1, "media_type": "person", "name": "Bong Joon-ho"})


class TestSpotifyNormalizer:
    def test_normalize(self):
        candidate = SpotifyNormalizer().normalize(
            {
                "id": "1weenld61qoidwYuZ1GESA",
                "name": "Kind Of Blue",
                "artists": [{"name": "Miles Davis"}, {"name": "John Coltrane"}],
                "images": [{"url": "https://i.scdn.co/image/large"}],
                "release_date": "1959-08-17",
                "album_type": "album",
                "total_tracks": 5,
                "external_urls": {"spotify": "https://open.spotify.com/album/1weenld61qoidwYuZ1GESA"},
            }
        )

        assert candidate.external_id == "spotify-1weenld61qoidwYuZ1GESA"
        assert candidate.creator == "Miles Davis"
        assert candidate.cover_image_url == "https://i.scdn.co/image/large"
        assert candidate.metadata["artists"] == ["Miles Davis", "John Coltrane"]
        assert candidate.metadata["totalTracks"] == 5


class TestIgdbNormalizer:
    def test_developer_is_creator(self):
        candidate = IgdbNormalizer().normalize(
            {
                "id": 113112,
                "name": "Hades",
                "first_release_date": 1600300800,
                "cover": {"image_id": "co39vc"},
                "platforms": [{"name": "PC (Microsoft Windows)"}, {"name": "Nintendo Switch"}],
                "involved_companies": [
                    {"company": {"name": "Supergiant Games"}, "developer": True, "publisher": True},
                ],
                "total_rating": 92.6,
            }
        )

        assert candidate.external_id == "igdb-113112"
        assert candidate.creator == "Supergiant Games"
        assert candidate.cover_image_url == (
            "https://images.igdb.com/igdb/image/upload/t_cover_big/co39vc.jpg"
        )
        assert candidate.metadata["releaseDate"] == "2020-09-17"
        assert candidate.metadata["rating"] == 93

    def test_publisher_when_no_developer(self):
        candidate = IgdbNormalizer().normalize(
            {
                "id": 1,
                "name": "Some Game",
                "involved_companies": [{"company": {"name": "Pub Co"}, "publisher": True}],
            }
        )

        assert candidate.creator == "Pub Co"
        assert candidate.metadata["releaseDate"] == ""
