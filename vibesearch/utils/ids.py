"""Deterministic media ids."""


def generate_media_id(title: str, media_type: str) -> str:
    """
    Id derived from type and title, e.g. ("Cowboy Bebop", "anime") -> "anime-Cowboy-Bebop".

    ASCII letters and digits are kept, spaces and hyphens become "-", anything else is dropped.
    """
    out = []
    for ch in f"{media_type}-{title}":
        if ch.isascii() and ch.isalnum():
            out.append(ch)
        elif ch in (" ", "-"):
            out.append("-")
    return "".join(out)
