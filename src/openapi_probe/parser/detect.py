"""Detect where spec content should be read from."""

URL_PREFIXES = ("http://", "https://")


def detect_source(location: str | None) -> str:
    """Classify a spec location.

    Returns: 'url', 'file', or 'raw' (no location, use pasted content).
    """
    if location is None or not location.strip():
        return "raw"
    if location.strip().lower().startswith(URL_PREFIXES):
        return "url"
    return "file"
