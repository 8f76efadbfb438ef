"""
Text helpers
"""

import re
import unicodedata
from pathlib import PurePath
from typing import Iterable, List


def normalize_genre_name(name: str) -> str:
    """Genres are stored trimmed and lower-cased"""
    return name.strip().lower()


def normalize_genre_names(names: Iterable[str]) -> List[str]:
    """
    Normalize a list of genre names

    Empty names are dropped and duplicates collapse to their first occurrence.
    """
    normalized = []
    for name in names:
        value = normalize_genre_name(name)
        if value and value not in normalized:
            normalized.append(value)
    return normalized


def slugify(text: str) -> str:
    """
    Turn a story title into a filename-safe slug

    Accents are stripped ("Đêm Trăng" -> "dem_trang").
    """
    value = unicodedata.normalize("NFD", text)
    value = "".join(ch for ch in value if unicodedata.category(ch) != "Mn")
    value = value.lower().replace("đ", "d")
    value = re.sub(r"[^a-z0-9\s_-]+", "", value)
    value = re.sub(r"[\s_-]+", "_", value)
    return value.strip("_")


def strip_extension(filename: str) -> str:
    """Chapter titles come from upload names without their extension"""
    return PurePath(filename).stem
