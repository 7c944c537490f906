"""resourceVersion merge policy."""

from __future__ import annotations

import re

_UINT32_MAX = 2**32 - 1
_DECIMAL = re.compile(r"[0-9]+")

ZERO_VERSION = "0"


def parse_uint32(value: str) -> int | None:
    """Return *value* as an unsigned 32-bit integer, or None if it is not one."""
    if not _DECIMAL.fullmatch(value):
        return None
    number = int(value)
    if number > _UINT32_MAX:
        return None
    return number


def merge_resource_version(current: str, incoming: str) -> str:
    """Combine the stored cursor with a version seen on the stream.

    resourceVersion is opaque by contract, but the API server does redeliver
    old notifications, so when both sides are numeric the larger one wins.
    Anything else is an unordered token and the incoming value is kept as is.
    """
    current_num = parse_uint32(current)
    incoming_num = parse_uint32(incoming)
    if current_num is None or incoming_num is None:
        return incoming
    return str(max(current_num, incoming_num))
