import re

_NON_SLUG_CHARS = re.compile(r"[^\w\s-]")
_WHITESPACE = re.compile(r"\s+")

def slugify(name: str) -> str:
    """
    Slug d'une catégorie à partir de son nom:
    minuscules, suppression de la ponctuation (hors tirets), espaces -> '-'.
    Ex: "Home & Garden!" -> "home-garden"
    """
    value = (name or "").strip().lower()
    value = _NON_SLUG_CHARS.sub("", value)
    return _WHITESPACE.sub("-", value)
