# team_pokedex/utils/text_utils.py
import re
import unicodedata

_COMBINING_MARKS_RE = re.compile(r"[\u0300-\u036f]")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_name(value) -> str:
    """Builds the lookup key for a Pokémon name or id.

    "Pikachu", "PIKACHU" and "pikachu" share a key, accents are dropped
    ("Évoli" -> "evoli") and punctuation collapses to hyphens
    ("Mr. Mime" -> "mr-mime").
    """
    decomposed = unicodedata.normalize("NFD", str(value))
    stripped = _COMBINING_MARKS_RE.sub("", decomposed).lower()
    return _NON_ALNUM_RE.sub("-", stripped).strip("-")


def slugify_name(value) -> str:
    """URL-safe slug, the shape PokéAPI accepts as an identifier."""
    return normalize_name(value)


def capitalize_name(name: str) -> str:
    return " ".join(word[:1].upper() + word[1:].lower() for word in name.split())


def sanitize_flavor_text(raw_text: str) -> str:
    # Flavor text comes straight from the game files with \f page breaks
    text = raw_text.replace("\f", " ")
    return _WHITESPACE_RE.sub(" ", text).strip()
