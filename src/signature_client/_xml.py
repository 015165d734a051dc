"""Small XML helpers shared by the manifest and request builders and the parsers."""

from __future__ import annotations

from datetime import datetime, timezone
from xml.sax.saxutils import escape as _xml_escape

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'


def xml_escape(s: str) -> str:
    """Escape XML special characters in user input."""
    return _xml_escape(s, {'"': "&quot;", "'": "&apos;"})


def element(tag: str, text: str | None, indent: str = "  ") -> str:
    """Render ``<tag>text</tag>``, or nothing when ``text`` is None."""
    if text is None:
        return ""
    return f"{indent}<{tag}>{xml_escape(text)}</{tag}>\n"


def format_datetime(value: datetime) -> str:
    """Format as xs:dateTime. Naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat(timespec="seconds")


def strip_namespace(tag: str) -> str:
    """Strip XML namespace prefix from a tag name."""
    return tag.split("}")[-1] if "}" in tag else tag
