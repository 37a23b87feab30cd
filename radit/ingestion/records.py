"""Source-agnostic registry records and record value parsing."""

from __future__ import annotations

from dataclasses import dataclass, field

from radit.notation import is_numeric_oid
from radit.tree import UNBOUNDED
from radit.utils import RecordValueError, is_number
from radit.xref import XRef, XRefKind

_UNBOUNDED_SUFFIX = " and up"


@dataclass(frozen=True)
class RecordValue:
    """Parsed ``<value>`` of a record.

    number:         the arc the record occupies
    range_terminus: last arc of a finite range, UNBOUNDED for "N and up"
    dot:            full dotted OID when the value was given as one
    """

    number: int
    range_terminus: int | None = None
    dot: str = ""


def parse_value(value: str) -> RecordValue:
    """Parse a record value: ``5``, ``5-9``, ``5 and up`` or ``1.3.6.1.5``.

    Raises RecordValueError for anything else.
    """
    v = (value or "").strip()

    if v.endswith(_UNBOUNDED_SUFFIX):
        lo = v[: -len(_UNBOUNDED_SUFFIX)].strip()
        if is_number(lo):
            return RecordValue(number=int(lo), range_terminus=UNBOUNDED)
        raise RecordValueError(f"Bad open range: {value!r}")

    if "-" in v:
        lo, _, hi = v.partition("-")
        lo, hi = lo.strip(), hi.strip()
        if is_number(lo) and is_number(hi):
            return RecordValue(number=int(lo), range_terminus=int(hi))
        raise RecordValueError(f"Bad range: {value!r}")

    if is_number(v):
        return RecordValue(number=int(v))

    if is_numeric_oid(v):
        # ldap-parameters carries full OIDs where a number form is expected
        return RecordValue(number=int(v.rsplit(".", 1)[1]), dot=v)

    raise RecordValueError(f"Bad value; not a range, number form or dot notation: {value!r}")


@dataclass(frozen=True)
class RawRecord:
    """One registry entry before it is placed in the tree."""

    value: str
    name: str = ""
    description: str = ""
    xrefs: tuple[XRef, ...] = field(default_factory=tuple)

    @property
    def obsolete(self) -> bool:
        """Decided by the first ``note`` or ``text`` cross-reference."""
        for xref in self.xrefs:
            if xref.kind in (XRefKind.note, XRefKind.text):
                return xref.marks_obsolete
        return False

    def parsed_value(self) -> RecordValue:
        return parse_value(self.value)
