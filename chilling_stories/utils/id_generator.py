"""
ID generator

Unique, time-sortable identifiers for every entity
"""

import ulid


def generate_ulid() -> str:
    """
    Generate a ULID (Universally Unique Lexicographically Sortable Identifier)

    Properties:
    - 128-bit compatible
    - sorted by creation time
    - canonical 26 character string form

    Returns:
        ULID string
    """
    return str(ulid.new())


def generate_user_id() -> str:
    """
    Generate a user ID

    Format: user_<ulid>
    Example: user_01ARZ3NDEKTSV4RRFFQ69G5FAV
    """
    return f"user_{generate_ulid()}"


def generate_story_id() -> str:
    """
    Generate a story ID

    Format: story_<ulid>
    Example: story_01ARZ3NDEKTSV4RRFFQ69G5FAV
    """
    return f"story_{generate_ulid()}"


def generate_chapter_id() -> str:
    """
    Generate a chapter ID

    Format: chapter_<ulid>
    Example: chapter_01ARZ3NDEKTSV4RRFFQ69G5FAV
    """
    return f"chapter_{generate_ulid()}"
