import re

IMAGE_EXTENSION = ".png"

_WHITESPACE = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^a-z0-9_]")

def slugify(name: str) -> str:
    """
    "Iron Helm" -> "iron_helm". Whitespace runs collapse to one underscore,
    anything outside [a-z0-9_] is dropped.
    """
    slug = _WHITESPACE.sub("_", name.lower())
    return _DISALLOWED.sub("", slug)

def expected_filename(name: str) -> str:
    return f"{slugify(name)}{IMAGE_EXTENSION}"

def filename_from_url(url: str) -> str:
    return url.split("/")[-1]
