from urllib.parse import urlparse


def extract_hostname(url: str) -> str:
    """Host part of ``url`` without a leading ``www.``; ``"unknown"`` if it has none."""
    try:
        hostname = urlparse((url or "").strip()).hostname
    except ValueError:
        return "unknown"
    if not hostname:
        return "unknown"
    return hostname[4:] if hostname.startswith("www.") else hostname
