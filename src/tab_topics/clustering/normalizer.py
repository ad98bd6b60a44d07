"""
Tab text normalization.

Turns a tab's title and URL into the lowercase document string the
weighting model indexes. Site names that browsers and sites append to
titles ("... - GitHub", "... | MDN") carry no topical signal, so the
trailing site token is stripped before punctuation is flattened.
"""

import re
from typing import Optional
from urllib.parse import urlparse

from tab_topics.config import get_logger

logger = get_logger(__name__)

_SEPARATORS = re.compile(r"[|•·\-–—]")
# Anything that is not a Unicode letter, digit or whitespace
_NON_WORD = re.compile(r"[^\w\s]|_")
_WHITESPACE = re.compile(r"\s+")


def site_token(url: str) -> Optional[str]:
    """
    Extract the site token from a URL.

    The site token is the first dot-delimited label of the hostname after
    a leading ``www.`` is removed.

    Examples:
        https://www.github.com/user/repo → github
        https://doc.rust-lang.org/book → doc

    Args:
        url: Tab URL

    Returns:
        Lowercase site token, or None if the URL has no hostname
    """
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return None

    if not hostname:
        return None

    hostname = re.sub(r"^www\.", "", hostname)
    return hostname.split(".")[0] or None


def _flatten(text: str) -> str:
    text = _SEPARATORS.sub(" ", text)
    text = _NON_WORD.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def clean_title(title: str, url: str) -> str:
    """
    Derive the document text for a tab.

    Args:
        title: The browser tab title
        url: The tab URL

    Returns:
        Cleaned lowercase text containing only letters, digits and single spaces
    """
    cleaned = (title or "").lower()

    token = site_token(url or "")
    if token is None:
        logger.debug(f"No hostname in {url!r}, normalizing title only")
        return _flatten(cleaned)

    cleaned = re.sub(
        rf"[\s\-–—|]+{re.escape(token)}\s*$", "", cleaned, flags=re.IGNORECASE
    )
    return _flatten(cleaned)
