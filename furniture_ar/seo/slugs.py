"""
Slug normalization and generation.

Slugs are the human-readable parts of shareable URLs:

    /f/{customer_slug}/{url_slug}/{color_slug}

A model's ``url_slug`` always ends with the model's opaque 8-character id
(``modern-sofa-Ct81wo8G``). The id is the authoritative key; the text before
it is informational and may drift when a title is edited.

All functions here are pure. Backfill regenerates slugs with them and must
reproduce links that were already handed out, so the output for a given input
must never change.
"""

from __future__ import annotations

import re
import secrets
import string
import unicodedata
from typing import Optional

import structlog

logger = structlog.get_logger()

MAX_SLUG_LENGTH = 60
FALLBACK_SLUG = "item"
UNASSIGNED_CUSTOMER = "unassigned"

MODEL_ID_LENGTH = 8
# New ids are base62; older rows carry nanoid ids, which may also contain "_" and "-".
MODEL_ID_ALPHABET = string.ascii_letters + string.digits
MODEL_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{%d}" % MODEL_ID_LENGTH)

# Letters that NFKD leaves intact but that have a customary ASCII spelling.
_TRANSLITERATIONS = {
    "æ": "ae",
    "ø": "o",
    "ß": "ss",
    "đ": "d",
    "ł": "l",
    "þ": "th",
    "œ": "oe",
}

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def _slugify(text: Optional[str]) -> str:
    """Slugify ``text`` without applying the fallback token.

    Returns an empty string when nothing slug-able remains.
    """
    if not text:
        return ""

    lowered = text.lower()
    lowered = "".join(_TRANSLITERATIONS.get(ch, ch) for ch in lowered)

    # Split accented characters into base letter + combining mark, then drop the marks
    decomposed = unicodedata.normalize("NFKD", lowered)
    ascii_text = decomposed.encode("ascii", "ignore").decode("ascii")

    slug = _NON_ALNUM.sub("-", ascii_text.lower()).strip("-")

    if len(slug) > MAX_SLUG_LENGTH:
        cut = slug[:MAX_SLUG_LENGTH]
        if slug[MAX_SLUG_LENGTH] != "-" and "-" in cut:
            cut = cut[: cut.rfind("-")]
        slug = cut.strip("-")

    return slug


def normalize_slug(text: Optional[str]) -> str:
    """
    Turn arbitrary display text into a URL-safe slug.

    - Diacritics are stripped (``"Café Chair"`` -> ``"cafe-chair"``)
    - Every run of non-alphanumeric characters collapses to a single hyphen
    - Leading/trailing hyphens are trimmed
    - Output is at most 60 characters, cut at a word boundary when possible
    - Empty or all-symbol input yields ``"item"``

    Examples:
        "Modern Sofa" -> "modern-sofa"
        "  Ærø  Lounge--Chair!! " -> "aero-lounge-chair"
        "@@@" -> "item"
    """
    return _slugify(text) or FALLBACK_SLUG


def generate_model_slug(title: Optional[str], model_id: str) -> str:
    """Return ``{normalize_slug(title)}-{model_id}``.

    Embedding the id keeps the combined slug globally unique even when two
    products share a title.
    """
    return f"{normalize_slug(title)}-{model_id}"


def generate_variant_slug(variant_name: Optional[str], hex_color: Optional[str]) -> str:
    """Slug for a variant: its name, else ``color-{hex}``, else the fallback."""
    name_slug = _slugify(variant_name)
    if name_slug:
        return name_slug

    hex_slug = _slugify((hex_color or "").lstrip("#"))
    if hex_slug:
        return f"color-{hex_slug}"

    return FALLBACK_SLUG


def customer_slug_for(customer_id: Optional[str], customer_name: Optional[str] = None) -> str:
    """Slug used for the customer segment of shareable URLs."""
    return _slugify(customer_id) or _slugify(customer_name) or UNASSIGNED_CUSTOMER


def normalize_customer_id(customer_id: Optional[str]) -> str:
    """Customer ids are case-insensitive; they are stored lowercase."""
    cleaned = (customer_id or "").strip().lower()
    return cleaned or UNASSIGNED_CUSTOMER


def is_model_id(token: str) -> bool:
    """True when ``token`` has the shape of an opaque model/variant id."""
    return bool(MODEL_ID_PATTERN.fullmatch(token))


def generate_model_id() -> str:
    """Generate a new opaque 8-character base62 id."""
    return "".join(secrets.choice(MODEL_ID_ALPHABET) for _ in range(MODEL_ID_LENGTH))


def split_model_slug(product_slug_with_id: str) -> tuple[str, Optional[str]]:
    """
    Split ``{product-slug}-{id}`` into ``(prefix, id)``.

    The id is the last 8 characters when they are id-shaped and either make up
    the whole segment (a bare id yields ``("", id)``) or follow a hyphen. Ids
    may themselves contain hyphens, so the segment is cut by length rather
    than at the last hyphen. Otherwise the id is ``None`` and the whole string
    is returned as prefix.
    """
    segment = product_slug_with_id
    candidate = segment[-MODEL_ID_LENGTH:]
    if is_model_id(candidate):
        if len(segment) == MODEL_ID_LENGTH:
            return "", candidate
        if segment[-MODEL_ID_LENGTH - 1] == "-":
            return segment[: -MODEL_ID_LENGTH - 1], candidate
    logger.debug("slug.no_id_suffix", product_slug=segment)
    return segment, None
