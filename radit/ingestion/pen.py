"""IANA Private Enterprise Numbers (PEN) registry loader.

The registry is plain text: a fixed header followed by groups of four
non-blank lines::

    56521
      ACME
        Jane Doe
          jane&acme.example

Records are scanned in full first, then placed beneath the primed
``enterprise`` arc (1.3.6.1.4.1).

Source: https://www.iana.org/assignments/enterprise-numbers.txt
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator

from radit.authority import Authority, AuthorityRegistry, ContactPolicy
from radit.catalog import CuratedData
from radit.notation import asn1_to_arcs
from radit.tree import Node, OIDTree
from radit.utils import SourceReadError, TreeNotPrimedError, is_number, unescape_email

logger = logging.getLogger(__name__)

ENTERPRISE_DOT = "1.3.6.1.4.1"
DEFAULT_HEADER_LINES = 16
NONE_PLACEHOLDER = "---none---"


@dataclass
class PenRecord:
    """One enterprise number group as it appears in the text registry."""

    decimal: int
    name: str = ""
    contact: str = ""
    email: str = ""


class _ScanState(Enum):
    decimal = "decimal"
    name = "name"
    contact = "contact"
    email = "email"


def scan_pen_lines(lines: Iterable[str], header_lines: int = DEFAULT_HEADER_LINES) -> Iterator[PenRecord]:
    """Yield PEN records from registry lines.

    One state per non-blank line: decimal, name, contact, email. A record
    is emitted after its email line, on a blank line while a record is
    incomplete, and at end of input. Blank lines between groups do not
    change state; non-numeric lines where a decimal is expected are
    skipped.
    """
    state = _ScanState.decimal
    current: PenRecord | None = None

    for lineno, raw in enumerate(lines):
        if lineno < header_lines:
            continue

        line = raw.strip()
        if not line:
            if current is not None:
                yield current
                current = None
                state = _ScanState.decimal
            continue

        if state is _ScanState.decimal:
            if not is_number(line):
                logger.debug("Skipping non-numeric line %d: %r", lineno + 1, line)
                continue
            current = PenRecord(decimal=int(line))
            state = _ScanState.name
        elif state is _ScanState.name:
            current.name = line
            state = _ScanState.contact
        elif state is _ScanState.contact:
            current.contact = line
            state = _ScanState.email
        else:
            current.email = line
            yield current
            current = None
            state = _ScanState.decimal

    if current is not None:
        yield current


def _field(value: str) -> str:
    value = value.strip()
    return "" if value == NONE_PLACEHOLDER else value


class PenRegistryLoader:
    """Place PEN records in the tree and attach their contacts."""

    def __init__(
        self,
        tree: OIDTree,
        authorities: AuthorityRegistry,
        policy: ContactPolicy,
        curated: CuratedData | None = None,
    ) -> None:
        self.tree = tree
        self.authorities = authorities
        self.policy = policy
        self.curated = curated or CuratedData()
        self._supplemented: set[int] = set()

    def load(self, path: Path | str, header_lines: int = DEFAULT_HEADER_LINES) -> int:
        """Load a PEN text file. Returns the number of records placed."""
        path = Path(path)
        try:
            with open(path, encoding="utf-8", errors="replace") as f:
                records = list(scan_pen_lines(f, header_lines))
        except OSError as e:
            raise SourceReadError(f"Cannot read PEN registry {path}: {e}") from e

        count = self.apply_all(records)
        logger.info("Loaded %d enterprise numbers from %s", count, path)
        return count

    def apply_all(self, records: Iterable[PenRecord]) -> int:
        parent = self.enterprise_node()
        count = 0
        for record in records:
            self.apply(record, parent)
            count += 1
        return count

    def enterprise_node(self) -> Node:
        parent = self.tree.lookup(ENTERPRISE_DOT)
        if parent is None:
            raise TreeNotPrimedError(f"Missing {ENTERPRISE_DOT} parent; tree must be primed before use")
        return parent

    def apply(self, record: PenRecord, parent: Node | None = None) -> Node:
        """Allocate the node for one record and attach its fields."""
        parent = parent or self.enterprise_node()
        child = self.tree.allocate(parent.path + (record.decimal,))

        name = _field(record.name)
        contact = _field(record.contact)
        email = unescape_email(_field(record.email))

        if name:
            child.description = name

        if self.policy is ContactPolicy.dedicated:
            def populate(authority: Authority) -> None:
                authority.name = name
                authority.o = name
                authority.cn = contact
                authority.email = email

            authority = self.authorities.get_or_create(f"pen:{record.decimal}", populate)
            self.authorities.attach(child, authority, self.policy)
        else:
            if name:
                child.contact.o = name
            if contact:
                child.contact.cn = contact
            if email:
                child.contact.email = email

        self._load_supplement(record.decimal)
        return child

    def _load_supplement(self, decimal: int) -> None:
        notations = self.curated.enterprise_supplements.get(decimal)
        if not notations or decimal in self._supplemented:
            return
        self._supplemented.add(decimal)
        for notation in notations:
            self.tree.prime(asn1_to_arcs(notation)[0], [notation])
        logger.info("Loaded %d curated allocations beneath enterprise %d", len(notations), decimal)
