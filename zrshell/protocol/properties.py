"""Property extraction from zStatus dumps.

Status commands answer with one property per line, e.g.::

    *s Video Camera Line 1 id: 00#8&2cc2822b&0&0000
    *s Video Camera Line 1 Name: Logi Rally Camera
    *s Video Camera Line 2 ptzComId: -1
"""

from __future__ import annotations

STATUS_MARKER = "*s "


def parse_properties(response: str, prefix: str) -> dict[str, str]:
    """Collect ``key: value`` lines that start with ``prefix``.

    The key is everything before the first colon with the ``*s `` marker
    removed; the value is the trimmed remainder. Lines that do not start
    with the prefix, such as unsolicited notifications, are skipped. A key
    seen twice keeps its last value.

    Args:
        response: Raw multi-line response from the shell.
        prefix: Expected start of each property line.

    Returns:
        Mapping of property name to value, e.g.
        ``{"Video Camera Line 1 Name": "Logi Rally Camera"}``.
    """
    properties: dict[str, str] = {}
    for line in response.split("\n"):
        if not line.startswith(prefix):
            continue
        key, sep, value = line.partition(":")
        if not sep:
            continue
        key = key.replace(STATUS_MARKER, "", 1).rstrip()
        properties[key] = value.strip()
    return properties
