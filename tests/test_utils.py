"""
Helper tests - text normalization, identifiers and tokens
"""

from datetime import timedelta

import pytest

from chilling_stories.utils import (
    normalize_genre_names, slugify, strip_extension,
    generate_story_id, generate_chapter_id, generate_user_id,
    create_access_token, decode_access_token, get_password_hash, verify_password
)


class TestGenreNames:

    def test_trim_lower_and_dedupe(self):
        assert normalize_genre_names([" Horror", "horror ", "MYSTERY", "", "  "]) == ["horror", "mystery"]

    def test_keeps_first_seen_order(self):
        assert normalize_genre_names(["Thriller", "Gothic", "thriller"]) == ["thriller", "gothic"]


class TestSlugify:

    @pytest.mark.parametrize("title,expected", [
        ("The Hollow House", "the_hollow_house"),
        ("Đêm Trăng Máu", "dem_trang_mau"),
        ("  Ghosts!? & Ghouls  ", "ghosts_ghouls"),
        ("already_slugged-name", "already_slugged_name"),
        ("!!!", ""),
    ])
    def test_slugify(self, title, expected):
        assert slugify(title) == expected

    def test_strip_extension(self):
        assert strip_extension("Chapter 01 - The Door.txt") == "Chapter 01 - The Door"
        assert strip_extension("notes.v2.md") == "notes.v2"


class TestIdentifiers:

    def test_prefixes_and_uniqueness(self):
        assert generate_story_id().startswith("story_")
        assert generate_chapter_id().startswith("chapter_")
        assert generate_user_id().startswith("user_")
        assert len({generate_story_id() for _ in range(100)}) == 100


class TestTokens:

    def test_round_trip_claims(self):
        token = create_access_token({"sub": "user_1", "username": "mara", "role": "author"})

        claims = decode_access_token(token)
        assert claims["sub"] == "user_1"
        assert claims["role"] == "author"
        assert "exp" in claims

    def test_expired_and_garbage_tokens(self):
        expired = create_access_token({"sub": "user_1"}, expires_delta=timedelta(minutes=-5))

        assert decode_access_token(expired) is None
        assert decode_access_token("not.a.token") is None

    def test_password_hashing(self):
        hashed = get_password_hash("s3cret!")

        assert hashed != "s3cret!"
        assert verify_password("s3cret!", hashed) is True
        assert verify_password("wrong", hashed) is False
