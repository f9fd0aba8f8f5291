import re
from pathlib import PurePath
from urllib.parse import unquote, urlparse

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_filename(name: str) -> str:
    """Reduce a name to a single safe path component.

    Runs of characters outside [A-Za-z0-9._-] become "_", and leading dots
    are stripped so the result can be neither hidden nor a parent reference.
    """
    cleaned = _UNSAFE_CHARS.sub("_", name).lstrip(".")
    return cleaned or "_"


def generate_filename(url: str) -> str:
    """Generate filename from URL by combining domain and path.

    Returns format: "domain-filename" or just "domain" if no path.
    """
    parsed_url = urlparse(url)
    path_part = unquote(parsed_url.path).strip("/")

    if path_part:
        # Last path segment only; query and fragment are already split off
        path_part = path_part.split("/")[-1]
        return sanitize_filename(f"{parsed_url.netloc}-{path_part}")
    else:
        return sanitize_filename(parsed_url.netloc)


def deduplicate_filename(name: str, taken: set[str]) -> str:
    """Return name, or name with "-1", "-2", ... before its suffix if taken.

    The chosen name is added to taken.
    """
    candidate = name
    if candidate in taken:
        path = PurePath(name)
        counter = 1
        while candidate in taken:
            candidate = f"{path.stem}-{counter}{path.suffix}"
            counter += 1
    taken.add(candidate)
    return candidate
