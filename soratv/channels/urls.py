"""
Stream URL normalization.

Rewrites YouTube links into their privacy-enhanced embeddable form:

    https://youtu.be/ID                    -> https://www.youtube-nocookie.com/embed/ID
    https://www.youtube.com/watch?v=ID     -> https://www.youtube-nocookie.com/embed/ID
    https://www.youtube.com/live/ID        -> https://www.youtube-nocookie.com/embed/ID?autoplay=1
    https://www.youtube.com/embed/ID       -> https://www.youtube-nocookie.com/embed/ID
"""

from urllib.parse import parse_qs, urlsplit, urlunsplit

NOCOOKIE_EMBED = "https://www.youtube-nocookie.com/embed/"

_SHORT_HOSTS = ("youtu.be",)
_LONG_DOMAINS = ("youtube.com", "youtube-nocookie.com")


def _is_youtube_host(host: str) -> bool:
    if host in _SHORT_HOSTS:
        return True
    return any(host == domain or host.endswith("." + domain) for domain in _LONG_DOMAINS)


def normalize_youtube_url(url: str) -> str:
    """Return the embeddable no-cookie form of a YouTube URL.

    Non-YouTube and unparseable URLs are returned unchanged.
    """
    if not url or ("youtube" not in url and "youtu.be" not in url):
        return url

    try:
        parts = urlsplit(url)
        host = (parts.hostname or "").lower()
    except ValueError:
        return url

    if not parts.scheme or not _is_youtube_host(host):
        return url

    if host in _SHORT_HOSTS:
        video_id = parts.path.lstrip("/")
        return f"{NOCOOKIE_EMBED}{video_id}" if video_id else url

    video_ids = parse_qs(parts.query, keep_blank_values=True).get("v")
    if video_ids is not None:
        return f"{NOCOOKIE_EMBED}{video_ids[0]}"

    if parts.path.startswith("/live/"):
        video_id = parts.path[len("/live/"):]
        if video_id:
            return f"{NOCOOKIE_EMBED}{video_id}?autoplay=1"
        return url

    if "/embed/" in parts.path:
        netloc = parts.netloc.replace("youtube.com", "youtube-nocookie.com")
        return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))

    return url
