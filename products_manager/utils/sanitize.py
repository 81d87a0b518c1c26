"""Input sanitizers for product fields.

``sanitize_text_field`` reduces a value to a single line of plain text,
``sanitize_html`` keeps the subset of markup allowed in post content and
``escape_url`` drops URLs whose scheme is not on the allow list.
"""
import re
from typing import Optional
from urllib.parse import urlsplit

import nh3

_TAG_RE = re.compile(r"<[^>]*>")
_OCTET_RE = re.compile(r"%[a-fA-F0-9]{2}")
_WHITESPACE_RE = re.compile(r"[\r\n\t ]+")
_URL_STRIP_RE = re.compile(r"[^a-zA-Z0-9\-~+_.?#=!&;,/:%@$|*'()\[\]\u0080-\uffff]")

ALLOWED_TAGS = {
    "a", "abbr", "b", "blockquote", "br", "caption", "cite", "code", "del", "div",
    "em", "figcaption", "figure", "h1", "h2", "h3", "h4", "h5", "h6", "hr", "i",
    "img", "ins", "li", "ol", "p", "pre", "s", "span", "strong", "sub", "sup",
    "table", "tbody", "td", "tfoot", "th", "thead", "tr", "u", "ul",
}
ALLOWED_ATTRIBUTES = {
    "*": {"class", "id", "style", "title"},
    "a": {"href", "target"},
    "img": {"src", "alt", "width", "height"},
    "td": {"colspan", "rowspan"},
    "th": {"colspan", "rowspan", "scope"},
}
ALLOWED_URL_SCHEMES = {"http", "https", "ftp", "ftps", "mailto", "news", "irc", "gopher", "nntp", "feed", "telnet"}


def sanitize_text_field(value: Optional[str]) -> str:
    if value is None:
        return ""
    text = str(value)
    text = _TAG_RE.sub("", text)
    text = _OCTET_RE.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()


def sanitize_html(value: Optional[str]) -> str:
    if not value:
        return ""
    return nh3.clean(
        str(value),
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        url_schemes=ALLOWED_URL_SCHEMES,
        link_rel=None,
    )


def escape_url(value: Optional[str]) -> str:
    """Return a storable URL, or an empty string when the URL is not safe."""
    if not value:
        return ""
    url = str(value).strip().replace(" ", "%20")
    url = _URL_STRIP_RE.sub("", url)
    if not url:
        return ""
    scheme = urlsplit(url).scheme.lower()
    if scheme:
        if scheme not in ALLOWED_URL_SCHEMES:
            return ""
        return url
    # Relative values get a scheme unless they look like a path or fragment
    if url[0] not in "/#?" and not url.startswith("./"):
        url = "http://" + url
    return url
