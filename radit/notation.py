"""Conversions between dot notation, ASN.1 notation and arc sequences.

Dot notation:   ``1.3.6.1.4.1.56521``
ASN.1 notation: ``{iso(1) identified-organization(3) dod(6) internet(1)}``
Arc sequence:   ``(1, 3, 6, 1, 4, 1, 56521)``

Everything in this module is a pure function.
"""

from __future__ import annotations

import re
from typing import Sequence

from radit.utils import MalformedPathError, is_number

# ITU-T X.680 identifier: lower-case initial, then letters, digits and
# single hyphens, never ending in a hyphen.
_IDENTIFIER_RE = re.compile(r"^[a-z](?:-?[A-Za-z0-9])*$")
_NUMERIC_OID_RE = re.compile(r"^[0-2](?:\.(?:0|[1-9][0-9]*))+$")
_NAME_AND_NUMBER_RE = re.compile(r"^([A-Za-z][A-Za-z0-9-]*)\(([0-9]+)\)$")

Arc = tuple[str | None, int]


def is_identifier(value: str) -> bool:
    """Return True if *value* satisfies the X.680 identifier grammar."""
    return bool(value) and _IDENTIFIER_RE.match(value) is not None


def is_numeric_oid(value: str) -> bool:
    """Return True for a dotted OID with at least two arcs and a valid root."""
    return bool(value) and _NUMERIC_OID_RE.match(value) is not None


def parse_dot(dot: str) -> tuple[int, ...]:
    """Split a dot-delimited numeric path into arcs.

    Raises MalformedPathError for empty input or non-numeric arcs.
    """
    dot = (dot or "").strip()
    if not dot:
        raise MalformedPathError("empty numeric path")
    parts = dot.split(".")
    for part in parts:
        if not is_number(part):
            raise MalformedPathError(f"non-numeric arc {part!r} in {dot!r}")
    return tuple(int(p) for p in parts)


def to_dot(arcs: Sequence[int]) -> str:
    return ".".join(str(a) for a in arcs)


def to_arcs(path: str | Sequence[int]) -> tuple[int, ...]:
    """Normalize a dot string or an arc sequence into a validated tuple."""
    if isinstance(path, str):
        arcs = parse_dot(path)
    else:
        arcs = tuple(path)
        if not arcs:
            raise MalformedPathError("empty numeric path")
        for arc in arcs:
            if isinstance(arc, bool) or not isinstance(arc, int):
                raise MalformedPathError(f"non-numeric arc {arc!r}")
    for arc in arcs:
        if arc < 0:
            raise MalformedPathError(f"negative arc {arc} in {to_dot(arcs)}")
    if arcs[0] > 2:
        raise MalformedPathError(f"root arc must be 0, 1 or 2: {to_dot(arcs)}")
    return arcs


def parse_asn1(notation: str) -> list[Arc]:
    """Parse an ASN.1 ObjectIdentifierValue into (identifier, number) pairs.

    Bare number forms yield ``(None, n)``. A missing closing brace is
    tolerated; anything else that is not a name-and-number form or a
    number form raises MalformedPathError.
    """
    body = (notation or "").strip()
    if body.startswith("{"):
        body = body[1:]
    if body.endswith("}"):
        body = body[:-1]

    tokens = body.split()
    if not tokens:
        raise MalformedPathError(f"empty ASN.1 notation: {notation!r}")

    arcs: list[Arc] = []
    for token in tokens:
        if is_number(token):
            arcs.append((None, int(token)))
            continue
        match = _NAME_AND_NUMBER_RE.match(token)
        if match is None:
            raise MalformedPathError(f"bad arc {token!r} in {notation!r}")
        arcs.append((match.group(1), int(match.group(2))))
    return arcs


def asn1_to_arcs(notation: str) -> tuple[int, ...]:
    return tuple(n for _, n in parse_asn1(notation))


def name_and_number(identifier: str | None, number: int) -> str:
    if identifier:
        return f"{identifier}({number})"
    return str(number)


def build_asn1(arcs: Sequence[Arc]) -> str:
    """Inverse of parse_asn1."""
    return "{" + " ".join(name_and_number(ident, n) for ident, n in arcs) + "}"


def build_urn_notation(numbers: Sequence[str | int], labels: Sequence[str]) -> str:
    """Build ASN.1 notation from a registry URN label path and its OID.

    ``labels`` comes from a dotted registry label such as
    ``iso.org.dod.internet``; the URN segment ``org`` is the ASN.1
    ``identified-organization`` arc. Numeric labels contribute a number
    form only. Returns an empty string when the two sequences differ in
    length.
    """
    if len(numbers) != len(labels) or not labels:
        return ""

    names = list(labels)
    if len(names) > 1 and names[1] == "org":
        names[1] = "identified-organization"

    pairs: list[Arc] = []
    for name, number in zip(names, numbers):
        pairs.append((None if is_number(name) else name, int(number)))
    return build_asn1(pairs)
