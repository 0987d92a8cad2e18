"""XML-to-tree reader and root shape guard for the arXiv Atom feed."""

from __future__ import annotations

import logging
import re
from typing import Any, TypeGuard
from xml.parsers.expat import ExpatError

import xmltodict

from models import ArxivRawData

ATTRIBUTE_PREFIX = "@_"

LOGGER = logging.getLogger(__name__)

_INT_RE = re.compile(r"^[-+]?\d+$")
_FLOAT_RE = re.compile(r"^[-+]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][-+]?\d+)?$")
_HEX_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")


class FeedParseError(RuntimeError):
    """Raised when the upstream payload is not well-formed XML."""


def parse_feed_xml(text: str) -> Any:
    """Parse Atom XML into nested dicts.

    Attributes are keyed with ``@_`` and text is trimmed. Scalar-looking
    values (element text and attributes alike) are typed: ``true``/``false``
    become bools, decimal and ``0x`` hex text becomes int or float.
    A repeated element becomes a list; a single one stays a dict.
    """
    try:
        return xmltodict.parse(
            text,
            attr_prefix=ATTRIBUTE_PREFIX,
            strip_whitespace=True,
            postprocessor=_auto_type,
        )
    except ExpatError as exc:
        raise FeedParseError(f"Malformed feed XML: {exc}") from exc


def is_arxiv_raw_data(data: Any, logger: logging.Logger = LOGGER) -> TypeGuard[ArxivRawData]:
    """Return True when the parsed payload is an object.

    The ``feed`` key is checked by the caller, not here.
    """
    if not isinstance(data, dict):
        logger.error("Type guard failed: parsed data is not an object or is null.")
        return False
    return True


def feed_paging(feed: Any) -> dict[str, int | None]:
    """Read the OpenSearch paging counters from a feed node."""
    if not isinstance(feed, dict):
        feed = {}
    return {
        "total_results": _as_int(feed.get("opensearch:totalResults")),
        "start_index": _as_int(feed.get("opensearch:startIndex")),
        "items_per_page": _as_int(feed.get("opensearch:itemsPerPage")),
    }


def _auto_type(path: list, key: str, value: Any) -> tuple[str, Any]:
    if not isinstance(value, str):
        return key, value

    value = value.strip()
    if value in ("true", "false"):
        return key, value == "true"
    if _HEX_RE.match(value):
        return key, int(value, 16)
    if _INT_RE.match(value):
        return key, int(value)
    if _FLOAT_RE.match(value):
        return key, float(value)
    return key, value


def _as_int(value: Any) -> int | None:
    # <opensearch:*> elements carry their own xmlns attribute, which turns
    # them into {"@_xmlns:opensearch": ..., "#text": 10}
    if isinstance(value, dict):
        value = value.get("#text")
    return value if isinstance(value, int) and not isinstance(value, bool) else None
