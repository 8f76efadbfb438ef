"""
Utilities
"""

from .auth import create_access_token, verify_password, get_password_hash, decode_access_token
from .id_generator import generate_ulid, generate_user_id, generate_story_id, generate_chapter_id
from .logging import setup_logging
from .text import normalize_genre_name, normalize_genre_names, slugify, strip_extension

__all__ = [
    # Auth
    "create_access_token",
    "verify_password",
    "get_password_hash",
    "decode_access_token",

    # ID generators
    "generate_ulid",
    "generate_user_id",
    "generate_story_id",
    "generate_chapter_id",

    # Logging
    "setup_logging",

    # Text
    "normalize_genre_name",
    "normalize_genre_names",
    "slugify",
    "strip_extension",
]
