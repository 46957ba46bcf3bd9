# utils/urls.py - joining request paths onto a base URL
from urllib.parse import urlsplit, urlunsplit


def clean_path(path: str) -> str:
    """
    Shortest equivalent of a slash-separated path: repeated slashes collapse,
    "." segments go away and ".." removes the segment before it. A rooted
    path never climbs above "/". Trailing slashes are dropped.
    """
    if not path:
        return "."
    rooted = path.startswith("/")
    segments = []
    for seg in path.split("/"):
        if seg in ("", "."):
            continue
        if seg == "..":
            if segments and segments[-1] != "..":
                segments.pop()
            elif not rooted:
                segments.append("..")
            continue
        segments.append(seg)

    cleaned = "/".join(segments)
    if rooted:
        return "/" + cleaned
    return cleaned or "."


def join_path(*parts: str) -> str:
    """
    Join path parts with "/" and clean the result. Empty parts are skipped and
    a leading slash on a later part does not reset the path, so
    join_path("/api", "/users/1") == "/api/users/1".
    """
    non_empty = [p for p in parts if p]
    if not non_empty:
        return ""
    return clean_path("/".join(non_empty))


def rebase_url(url: str, base_url: str) -> str:
    """Move `url` onto `base_url`: scheme and host from the base, path joined onto the base path."""
    target = urlsplit(url)
    base = urlsplit(base_url)

    path = join_path(base.path, target.path)
    if base.netloc and not path.startswith("/"):
        path = "/" + path
    return urlunsplit((base.scheme, base.netloc, path, target.query, target.fragment))
