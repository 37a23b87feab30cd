"""Cross-reference classification.

Registry ``<xref>`` elements point at RFCs, errata, web pages, footnotes,
people or plain text. Each reference is parsed into a closed
:class:`XRefKind` and dispatched to exactly one handler that updates the
annotated node. Unknown ``type`` values map to ``XRefKind.unrecognized``,
whose handler does nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from radit.authority import AuthorityRegistry, ContactPolicy
from radit.tree import Node
from radit.utils import condense_whitespace

logger = logging.getLogger(__name__)

RFC_URI_PREFIX = "https://datatracker.ietf.org/doc/html/"
RFC_ERRATA_PREFIX = "https://www.rfc-editor.org/errata_search.php?eid="
IANA_ASSIGNMENTS_PREFIX = "https://iana.org/assignments/"

# Footnote anchor IANA uses for obsolete registrations.
OBSOLETE_NOTE_CODE = "1"

_UNDEFINED_CONTENT = "Not Defined ?"


class XRefKind(str, Enum):
    rfc = "rfc"
    draft = "draft"
    rfc_errata = "rfc-errata"
    uri = "uri"
    note = "note"
    text = "text"
    registry = "registry"
    person = "person"
    unrecognized = "unrecognized"

    @classmethod
    def parse(cls, type_name: str) -> XRefKind:
        try:
            kind = cls((type_name or "").strip().lower())
        except ValueError:
            return cls.unrecognized
        return kind


@dataclass(frozen=True)
class XRef:
    """One typed cross-reference: ``<xref type=".." data="..">content</xref>``."""

    kind: XRefKind
    data: str = ""
    content: str = ""
    type_name: str = ""

    @classmethod
    def from_fields(cls, type_name: str, data: str = "", content: str = "") -> XRef:
        return cls(
            kind=XRefKind.parse(type_name),
            data=(data or "").strip(),
            content=content or "",
            type_name=type_name or "",
        )

    def with_kind(self, kind: XRefKind, data: str | None = None, content: str | None = None) -> XRef:
        return XRef(
            kind=kind,
            data=self.data if data is None else data,
            content=self.content if content is None else content,
            type_name=kind.value,
        )

    @property
    def marks_obsolete(self) -> bool:
        if self.kind is XRefKind.note:
            return self.data == OBSOLETE_NOTE_CODE
        if self.kind is XRefKind.text:
            return condense_whitespace(self.content).lower() == "obsolete"
        return False


class CrossReferenceClassifier:
    """Apply cross-references to nodes.

    Needs the run's authority registry and contact policy to resolve
    ``person`` references.
    """

    def __init__(self, authorities: AuthorityRegistry, policy: ContactPolicy) -> None:
        self.authorities = authorities
        self.policy = policy
        self._handlers: dict[XRefKind, Callable[[XRef, Node], None]] = {
            XRefKind.rfc: self._document,
            XRefKind.draft: self._document,
            XRefKind.rfc_errata: self._errata,
            XRefKind.uri: self._uri,
            XRefKind.note: self._note,
            XRefKind.text: self._text,
            XRefKind.registry: self._registry,
            XRefKind.person: self._person,
            XRefKind.unrecognized: self._ignore,
        }

    def handler_for(self, kind: XRefKind) -> Callable[[XRef, Node], None]:
        return self._handlers[kind]

    def apply(self, xref: XRef, node: Node) -> None:
        self._handlers[xref.kind](xref, node)

    def apply_all(self, xrefs: Iterable[XRef], node: Node) -> None:
        """Apply references in order, stopping once the node is obsolete."""
        for xref in xrefs:
            if node.obsolete:
                break
            self.apply(xref, node)

    # -- Data-driven kinds ----------------------------------------------------

    def _document(self, xref: XRef, node: Node) -> None:
        if xref.data:
            node.add_uri(f"{RFC_URI_PREFIX}{xref.data} {xref.data.upper()}")

    def _errata(self, xref: XRef, node: Node) -> None:
        if xref.data:
            node.add_uri(f"{RFC_ERRATA_PREFIX}{xref.data} Errata ID {xref.data}")

    def _uri(self, xref: XRef, node: Node) -> None:
        if not xref.data:
            return
        label = condense_whitespace(xref.content)
        node.add_uri(f"{xref.data} {label}" if label else xref.data)

    def _note(self, xref: XRef, node: Node) -> None:
        if not xref.data:
            return
        if xref.data == OBSOLETE_NOTE_CODE:
            node.mark_obsolete()
        else:
            node.add_info(xref.data)

    def _person(self, xref: XRef, node: Node) -> None:
        if not xref.data:
            return
        authority = self.authorities.get(xref.data)
        if authority is None:
            logger.debug("Unknown person %r referenced by %s", xref.data, node.dot_notation)
            return
        self.authorities.attach(node, authority, self.policy)

    # -- Content-driven kinds -------------------------------------------------

    def _text(self, xref: XRef, node: Node) -> None:
        value = condense_whitespace(xref.content)
        if not value or value == _UNDEFINED_CONTENT:
            return
        if value.lower() == "obsolete":
            node.mark_obsolete()
        else:
            node.add_info(value)

    def _registry(self, xref: XRef, node: Node) -> None:
        value = condense_whitespace(xref.content)
        if value and value != _UNDEFINED_CONTENT:
            node.add_info(value)

    def _ignore(self, xref: XRef, node: Node) -> None:
        logger.debug("Ignoring %r cross-reference on %s", xref.type_name, node.dot_notation)
