"""
Code Signature Marker Lines

A marker is a single comment line carrying a key and a hex value:

    // @sha256sum 0x<64 hex>
    // @eip191signature 0x<130 hex>

The comment prefix is optional. Besides the configured prefix, the
alternate prefixes ``*``, ``#``, ``;`` and ``"`` are always recognized.
Only the first matching line for a key is ever recognized.
"""

import re
from dataclasses import dataclass
from typing import Optional

INTEGRITY_KEY = "@sha256sum"
PROVENANCE_KEY = "@eip191signature"

DEFAULT_PREFIX = "//"
ALTERNATE_PREFIXES = '*#;"'


@dataclass(frozen=True)
class Extraction:
    """Result of scanning content for one marker key."""
    content: str
    value: Optional[str] = None

    def found(self) -> bool:
        return self.value is not None


def marker_pattern(key: str, prefix: str = DEFAULT_PREFIX) -> "re.Pattern[str]":
    """
    Build the line pattern for a marker key.

    Group ``value`` spans the value token, which must start with ``0x``
    and contain no whitespace. Anything after the token is left alone.
    """
    prefixes = f"[{re.escape(ALTERNATE_PREFIXES)}]"
    if prefix:
        prefixes = f"(?:{prefixes}|{re.escape(prefix)})"
    return re.compile(
        rf"^\s*{prefixes}?\s*{re.escape(key)}\s+(?P<value>0x\S*)"
    )


def marker_line(key: str, value: str, prefix: str = DEFAULT_PREFIX) -> str:
    """Render a new marker line."""
    return " ".join(part for part in (prefix, key, value) if part)


def extract(
    content: str,
    key: str,
    prefix: str = DEFAULT_PREFIX,
    replacement: Optional[str] = None,
) -> Extraction:
    """
    Locate the first marker line for ``key``.

    Without ``replacement`` the matched line is dropped from the returned
    content. With ``replacement`` only the value token is rewritten and the
    line stays where it was. When nothing matches, the content is returned
    unchanged and the value is None.
    """
    pattern = marker_pattern(key, prefix)
    lines = content.split("\n")

    for index, line in enumerate(lines):
        match = pattern.match(line)
        if match is None:
            continue

        value = match.group("value")
        if replacement is None:
            rest = lines[:index] + lines[index + 1:]
        else:
            start, end = match.span("value")
            rest = lines[:index] + [line[:start] + replacement + line[end:]] + lines[index + 1:]
        return Extraction(content="\n".join(rest), value=value)

    return Extraction(content=content)


def upsert(
    content: str,
    key: str,
    value: str,
    prefix: str = DEFAULT_PREFIX,
) -> str:
    """
    Set the value of a marker, in place if the marker exists.

    A missing marker is prepended as a new first line.
    """
    rewritten = extract(content, key, prefix, replacement=value)
    if rewritten.found():
        return rewritten.content
    return "\n".join([marker_line(key, value, prefix), content])
