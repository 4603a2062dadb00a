"""
Path sanitizer - Turn a configured project path into a URL slug
"""


def sanitize_path(path: str) -> str:
    """
    Convert an arbitrary path into a lowercase, hyphen-separated slug.

    ASCII letters and digits are lowercased and kept. Every run of other
    characters becomes a single hyphen, and a trailing hyphen is dropped.

    Example:
        >>> sanitize_path("My Project/v2")
        'my-project-v2'
        >>> sanitize_path("already-sane")
        'already-sane'
    """
    sanitized = []
    last_was_dash = False

    for c in path:
        if c.isascii() and c.isalnum():
            sanitized.append(c.lower())
            last_was_dash = False
        elif not last_was_dash:
            sanitized.append("-")
            last_was_dash = True

    if sanitized and sanitized[-1] == "-":
        sanitized.pop()

    return "".join(sanitized)
