"""IANA SMI Numbers (and LDAP Parameters) XML registry loader.

The registry document is a tree of ``<registry>`` elements. Each one may
carry a title/description naming its OID, notes, cross-references, leaf
``<record>`` elements and further sub-registries. The root element also
lists the ``<person>`` entries that records refer to.

Loading happens in three steps:

1. parse the XML into plain dataclasses (:func:`parse_smi_document`);
2. harvest people and designated experts into the authority registry;
3. walk the registries, placing each one and its records in the tree.

Registration rules, footnotes, record dates and recommendation flags
carry nothing the tree stores, so they are not parsed.

Sources:
    https://www.iana.org/assignments/smi-numbers/smi-numbers.xml
    https://www.iana.org/assignments/ldap-parameters/ldap-parameters.xml
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field, replace
from pathlib import Path
from xml.sax.saxutils import escape

from radit.authority import AuthorityRegistry, ContactPolicy
from radit.catalog import CuratedData
from radit.ingestion.records import RawRecord, RecordValue
from radit.legalize import IdentifierLegalizer
from radit.notation import build_urn_notation, is_numeric_oid, parse_asn1, parse_dot, to_dot
from radit.tree import Node, OIDTree
from radit.utils import (
    DocumentError,
    PathMismatchError,
    RecordValueError,
    SourceReadError,
    condense_whitespace,
    is_number,
)
from radit.xref import IANA_ASSIGNMENTS_PREFIX, CrossReferenceClassifier, XRef, XRefKind

logger = logging.getLogger(__name__)

EXPERT_KEY_PREFIX = "expert:"


# ═══════════════════════════════════════════════════════════════════
# DOCUMENT MODEL
# ═══════════════════════════════════════════════════════════════════

@dataclass
class Person:
    key: str
    name: str = ""
    uri: str = ""


@dataclass
class Note:
    """A ``<note>`` element; *raw* is its inner markup, undecoded."""

    raw: str
    title: str = ""


@dataclass(frozen=True)
class DecodedNote:
    text: str
    xrefs: tuple[XRef, ...] = ()


@dataclass
class Registry:
    id: str = ""
    title: str = ""
    description: str = ""
    expert: str = ""
    notes: list[Note] = field(default_factory=list)
    xrefs: list[XRef] = field(default_factory=list)
    records: list[RawRecord] = field(default_factory=list)
    registries: list[Registry] = field(default_factory=list)
    # Authority keys of the designated experts, filled in by harvesting
    experts: list[str] = field(default_factory=list)

    @property
    def source_text(self) -> str:
        """Description, or the title when there is no description."""
        return self.description or self.title


@dataclass
class SMIDocument:
    id: str = ""
    title: str = ""
    people: list[Person] = field(default_factory=list)
    registries: list[Registry] = field(default_factory=list)


# ═══════════════════════════════════════════════════════════════════
# XML PARSING
# ═══════════════════════════════════════════════════════════════════

def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def _children(elem: ET.Element, name: str) -> list[ET.Element]:
    return [c for c in elem if _local(c.tag) == name]


def _text(elem: ET.Element | None) -> str:
    if elem is None:
        return ""
    return "".join(elem.itertext()).strip()


def _child_text(elem: ET.Element, name: str) -> str:
    found = _children(elem, name)
    return _text(found[0]) if found else ""


def _inner_xml(elem: ET.Element) -> str:
    """Serialize the content of *elem* (text and children, not the tag)."""
    parts = [escape(elem.text or "")]
    for child in elem:
        # tostring() includes the child's tail
        parts.append(ET.tostring(child, encoding="unicode"))
    return "".join(parts)


def _xref(elem: ET.Element) -> XRef:
    return XRef.from_fields(elem.get("type", ""), elem.get("data", ""), "".join(elem.itertext()))


def _parse_record(elem: ET.Element) -> RawRecord:
    return RawRecord(
        value=_child_text(elem, "value"),
        name=_child_text(elem, "name"),
        description=condense_whitespace(_child_text(elem, "description")),
        xrefs=tuple(_xref(x) for x in _children(elem, "xref")),
    )


def _parse_registry(elem: ET.Element) -> Registry:
    return Registry(
        id=elem.get("id", ""),
        title=_child_text(elem, "title"),
        description=_child_text(elem, "description"),
        expert=_child_text(elem, "expert"),
        notes=[Note(raw=_inner_xml(n), title=n.get("title", "")) for n in _children(elem, "note")],
        xrefs=[_xref(x) for x in _children(elem, "xref")],
        records=[_parse_record(r) for r in _children(elem, "record")],
        registries=[_parse_registry(r) for r in _children(elem, "registry")],
    )


def parse_smi_document(content: bytes | str) -> SMIDocument:
    """Parse registry XML into an :class:`SMIDocument`.

    Raises DocumentError if the XML is malformed or the root element is
    not a ``registry``.
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise DocumentError(f"Malformed registry XML: {e}") from e

    if _local(root.tag) != "registry":
        raise DocumentError(f"Expected <registry> root element, found <{_local(root.tag)}>")

    people = []
    for container in _children(root, "people"):
        for p in _children(container, "person"):
            people.append(Person(key=p.get("id", ""), name=_child_text(p, "name"), uri=_child_text(p, "uri")))

    return SMIDocument(
        id=root.get("id", ""),
        title=_child_text(root, "title"),
        people=people,
        registries=[_parse_registry(r) for r in _children(root, "registry")],
    )


def decode_note(raw: str) -> DecodedNote:
    """Second decoding pass over a note's inner markup.

    Character data is kept; each ``<xref>`` contributes its ``data``
    attribute to the text (its own content is dropped) and is returned
    as a cross-reference. Other elements are flattened.
    """
    try:
        root = ET.fromstring(f"<note>{raw}</note>")
    except ET.ParseError:
        logger.debug("Note markup is not well-formed; keeping it as text")
        return DecodedNote(text=condense_whitespace(raw))

    parts: list[str] = []
    xrefs: list[XRef] = []

    def visit(elem: ET.Element) -> None:
        if elem.text:
            parts.append(elem.text)
        for child in elem:
            if _local(child.tag) == "xref":
                parts.append(child.get("data", ""))
                xrefs.append(_xref(child))
            else:
                visit(child)
            if child.tail:
                parts.append(child.tail)

    visit(root)
    return DecodedNote(text=condense_whitespace("".join(parts)), xrefs=tuple(xrefs))


def description_and_oid(text: str) -> tuple[str, str]:
    """Split a registry description into (label, dot notation).

    Brackets are discarded and the text is split on whitespace; trailing
    dots are stripped. The last numeric-OID token is the OID and the last
    other token is the label. The OID is empty when there is none.
    """
    if not text:
        return "", ""

    desc = text
    for ch in "[]()":
        desc = desc.replace(ch, "")
    desc = desc.strip()

    label, dot = desc, ""
    for token in desc.split():
        token = token.rstrip(".")
        if is_numeric_oid(token):
            dot = token
        elif token:
            label = token
    return label, dot


# ═══════════════════════════════════════════════════════════════════
# AUTHORITY HARVESTING
# ═══════════════════════════════════════════════════════════════════

def harvest_authorities(document: SMIDocument, authorities: AuthorityRegistry) -> None:
    """Register every person and designated expert before records are placed."""
    for person in document.people:
        if person.key:
            authorities.get_or_create(person.key, authorities.populate_person(person.name, person.uri))
    for registry in document.registries:
        _harvest_experts(registry, authorities)


def _harvest_experts(registry: Registry, authorities: AuthorityRegistry) -> None:
    keys = []
    for entry in registry.expert.split(","):
        entry = entry.strip()
        if not condense_whitespace(entry):
            continue
        key = EXPERT_KEY_PREFIX + entry
        authorities.get_or_create(key, authorities.populate_expert(entry))
        keys.append(key)
    registry.experts = keys

    for sub in registry.registries:
        _harvest_experts(sub, authorities)


# ═══════════════════════════════════════════════════════════════════
# TREE PLACEMENT
# ═══════════════════════════════════════════════════════════════════

@dataclass
class LoadStats:
    registries: int = 0
    metadata_only: int = 0
    records: int = 0
    skipped: int = 0


@dataclass
class RegistryContext:
    """Everything a registry walk needs, passed down explicitly."""

    tree: OIDTree
    authorities: AuthorityRegistry
    classifier: CrossReferenceClassifier
    legalizer: IdentifierLegalizer
    curated: CuratedData
    policy: ContactPolicy
    stats: LoadStats = field(default_factory=LoadStats)
    enclosing: Node | None = None


def walk_registry(registry: Registry, ctx: RegistryContext) -> Node | None:
    """Place one registry, its records and its sub-registries.

    Returns the registry's node, or None for a registry without an OID
    (its records live in a separately distributed file).
    """
    override = ctx.curated.missing_registry_descriptions.get(registry.id)
    label, dot = description_and_oid(override or registry.source_text)

    node = None
    if dot:
        node = _place_registry(registry, label, dot, ctx)
        ctx.stats.registries += 1
    else:
        ctx.stats.metadata_only += 1
        logger.debug("Registry %r carries no OID; skipping its records", registry.id)

    sub_ctx = replace(ctx, enclosing=node or ctx.enclosing)
    for sub in registry.registries:
        walk_registry(sub, sub_ctx)

    if node is not None:
        node.sort_by_number(recursive=False)
    return node


def _place_registry(registry: Registry, label: str, dot: str, ctx: RegistryContext) -> Node:
    arcs = parse_dot(dot)
    node = ctx.tree.allocate(arcs)
    if node.dot_notation != dot:
        raise PathMismatchError(f"Allocation error: {node.dot_notation} != {dot}")

    _apply_label(node, label, arcs, ctx)

    for key in registry.experts:
        authority = ctx.authorities.get(key)
        if authority is not None:
            ctx.authorities.attach(node, authority, ctx.policy)

    ctx.classifier.apply_all(registry.xrefs, node)
    for note in registry.notes:
        if node.obsolete:
            break
        _apply_note(note, node, ctx)

    for record in registry.records:
        _place_record(record, node, ctx)

    return node


def _apply_label(node: Node, label: str, arcs: tuple[int, ...], ctx: RegistryContext) -> None:
    """Name the registry node and its ancestors from a URN label.

    ``iso.org.dod.internet`` against ``1.3.6.1`` fills in missing
    identifiers along the path and sets the node's ASN.1 notation.
    """
    labels = label.split(".")
    if len(labels) != len(arcs):
        return

    legal = [lab if is_number(lab) else ctx.legalizer.legalize(lab) for lab in labels]
    notation = build_urn_notation(arcs, legal)
    if not notation:
        return

    for ancestor, (ident, _) in zip(node.lineage(), parse_asn1(notation)):
        if ident:
            ancestor.set_identifier(ident)
    node.set_asn1_notation(notation)


def _apply_note(note: Note, node: Node, ctx: RegistryContext) -> None:
    decoded = decode_note(note.raw)

    clean = note.raw.strip()
    if decoded.text and clean and not clean.startswith("<"):
        # Notes that are nothing but markup are not registration info
        node.add_info(decoded.text)

    xrefs = []
    for xref in decoded.xrefs:
        if xref.kind is XRefKind.uri and note.title:
            xref = xref.with_kind(XRefKind.uri, content=note.title)
        elif xref.kind is XRefKind.registry and xref.data:
            xref = xref.with_kind(XRefKind.uri, data=IANA_ASSIGNMENTS_PREFIX + xref.data)
        xrefs.append(xref)
    ctx.classifier.apply_all(xrefs, node)


def _record_path(parent: Node, value: RecordValue) -> tuple[int, ...]:
    """Records are always children of their registry node.

    A dotted value contributes only its last arc.
    """
    path = parent.path + (value.number,)
    if value.dot and parse_dot(value.dot) != path:
        logger.debug(
            "Dotted value %s is not beneath %s; placing it at %s", value.dot, parent.dot_notation, to_dot(path)
        )
    return path


def record_identifier(record: RawRecord, parent: Node, number: int, ctx: RegistryContext) -> str:
    """Best legal identifier for a record, or '' for the numeric fallback."""
    name = record.name.strip()
    if is_number(name):
        return ""

    candidate = name
    if not candidate:
        candidate = ctx.curated.missing_record_name(parent.dot_notation, str(number))
        if not candidate:
            candidate = record.description

    identifier = ctx.legalizer.legalize(candidate)
    if not identifier and record.description:
        identifier = ctx.legalizer.legalize(record.description)
    return identifier


def _place_record(record: RawRecord, parent: Node, ctx: RegistryContext) -> Node | None:
    try:
        value = record.parsed_value()
    except RecordValueError as e:
        ctx.stats.skipped += 1
        logger.debug("Skipping record under %s: %s", parent.dot_notation, e)
        return None

    path = _record_path(parent, value)

    if record.obsolete:
        ctx.stats.skipped += 1
        existing = ctx.tree.lookup(path)
        if existing is not None:
            existing.mark_obsolete()
        return None

    identifier = record_identifier(record, parent, value.number, ctx)
    child = ctx.tree.allocate(path)
    if identifier:
        child.set_identifier(identifier)
    else:
        logger.debug("Numeric identifier fallback for %s", child.dot_notation)

    if value.range_terminus is not None:
        child.set_range(value.range_terminus)
    if record.description and not child.description:
        child.description = record.description

    ctx.classifier.apply_all(record.xrefs, child)
    ctx.stats.records += 1
    return child


# ═══════════════════════════════════════════════════════════════════
# LOADER
# ═══════════════════════════════════════════════════════════════════

class SMIRegistryLoader:
    """Load SMI Numbers / LDAP Parameters XML registries into an OID tree."""

    def __init__(
        self,
        tree: OIDTree,
        authorities: AuthorityRegistry,
        policy: ContactPolicy,
        legalizer: IdentifierLegalizer | None = None,
        curated: CuratedData | None = None,
    ) -> None:
        self.tree = tree
        self.authorities = authorities
        self.policy = policy
        self.curated = curated or CuratedData()
        self.legalizer = legalizer or IdentifierLegalizer(self.curated.identifier_exceptions)
        self.classifier = CrossReferenceClassifier(authorities, policy)

    def load(self, path: Path | str) -> LoadStats:
        """Load one registry file. Fatal errors propagate unchanged."""
        path = Path(path)
        try:
            content = path.read_bytes()
        except OSError as e:
            raise SourceReadError(f"Cannot read registry {path}: {e}") from e

        stats = self.load_document(parse_smi_document(content))
        logger.info(
            "Loaded %s: %d registries, %d records (%d skipped, %d without OID)",
            path.name, stats.registries, stats.records, stats.skipped, stats.metadata_only,
        )
        return stats

    def load_document(self, document: SMIDocument) -> LoadStats:
        harvest_authorities(document, self.authorities)

        ctx = RegistryContext(
            tree=self.tree,
            authorities=self.authorities,
            classifier=self.classifier,
            legalizer=self.legalizer,
            curated=self.curated,
            policy=self.policy,
        )
        for registry in document.registries:
            walk_registry(registry, ctx)
        return ctx.stats
