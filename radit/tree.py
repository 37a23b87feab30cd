"""In-memory OID tree: nodes keyed by numeric arc under three fixed roots.

The tree is the only owner of :class:`Node` instances. Nodes are created
exclusively through :meth:`OIDTree.allocate` (or priming) and are never
removed; enrichment passes mutate them in place.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Iterable, Iterator, Sequence

from radit.notation import (
    build_asn1,
    asn1_to_arcs,
    is_identifier,
    parse_asn1,
    to_arcs,
    to_dot,
)
from radit.utils import (
    InvalidIdentifierError,
    MalformedPathError,
    PathMismatchError,
    TreeNotPrimedError,
    is_number,
)

logger = logging.getLogger(__name__)

ROOT_NAMES = ("itu-t", "iso", "joint-iso-itu-t")

# Range terminus of an open-ended ("N and up") allocation.
UNBOUNDED = -1


class NodeStatus(str, Enum):
    """Lifecycle status of a registration."""
    normal = "normal"
    obsolete = "obsolete"


@dataclass
class InlineContact:
    """Authority fields stored directly on a node (combined policy)."""

    o: str = ""
    cn: str = ""
    email: str = ""
    uri: str = ""

    def is_empty(self) -> bool:
        return not (self.o or self.cn or self.email or self.uri)

    def to_dict(self) -> dict[str, str]:
        return {k: v for k, v in asdict(self).items() if v}


class Node:
    """A single registration in the OID tree."""

    def __init__(self, number: int, parent: Node | None = None) -> None:
        self.number = number
        self.parent = parent
        self.path: tuple[int, ...] = (parent.path if parent else ()) + (number,)
        self.description = ""
        self.info: list[str] = []
        self.status = NodeStatus.normal
        self.uris: list[str] = []
        self.authority_ids: list[str] = []
        self.contact = InlineContact()
        self.range_terminus: int | None = None
        self._identifier = ""
        self._asn1 = ""
        self._children: dict[int, Node] = {}

    def __repr__(self) -> str:
        return f"Node({self.dot_notation!r}, identifier={self.identifier!r})"

    # -- Naming ---------------------------------------------------------------

    @property
    def dot_notation(self) -> str:
        return to_dot(self.path)

    @property
    def depth(self) -> int:
        return len(self.path) - 1

    @property
    def identifier(self) -> str:
        """Symbolic identifier, or the bare arc when none was assigned."""
        return self._identifier or str(self.number)

    @property
    def has_identifier(self) -> bool:
        return bool(self._identifier)

    def set_identifier(self, value: str, overwrite: bool = False) -> bool:
        """Assign a symbolic identifier.

        Empty and numeric values are the numeric fallback and never replace
        anything. An existing identifier is kept unless *overwrite* is set.
        Returns True when the identifier changed.
        """
        if not value or is_number(value):
            return False
        if not is_identifier(value):
            raise InvalidIdentifierError(f"{value!r} is not a valid identifier ({self.dot_notation})")
        if self._identifier and not overwrite:
            return False
        self._identifier = value
        return True

    @property
    def asn1_notation(self) -> str:
        """ASN.1 notation, explicit if one was set, else built from ancestors."""
        if self._asn1:
            return self._asn1
        return build_asn1([(n._identifier or None, n.number) for n in self.lineage()])

    def set_asn1_notation(self, notation: str) -> None:
        if asn1_to_arcs(notation) != self.path:
            raise PathMismatchError(f"{notation} does not denote {self.dot_notation}")
        self._asn1 = notation

    def lineage(self) -> list[Node]:
        """Nodes from the root down to (and including) this node."""
        chain: list[Node] = []
        node: Node | None = self
        while node is not None:
            chain.append(node)
            node = node.parent
        chain.reverse()
        return chain

    # -- Children -------------------------------------------------------------

    @property
    def children(self) -> list[Node]:
        return list(self._children.values())

    def child(self, number: int) -> Node | None:
        return self._children.get(number)

    def _add_child(self, number: int) -> Node:
        node = Node(number, parent=self)
        self._children[number] = node
        return node

    def sort_by_number(self, recursive: bool = True) -> None:
        """Reorder children by ascending arc (the canonical output order)."""
        self._children = dict(sorted(self._children.items()))
        if recursive:
            for node in self._children.values():
                node.sort_by_number(recursive=True)

    def iter_subtree(self) -> Iterator[Node]:
        """Pre-order traversal starting with this node."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    # -- Metadata -------------------------------------------------------------

    @property
    def obsolete(self) -> bool:
        return self.status is NodeStatus.obsolete

    def mark_obsolete(self) -> None:
        self.status = NodeStatus.obsolete

    def add_info(self, text: str) -> None:
        if text and text not in self.info:
            self.info.append(text)

    def add_uri(self, uri: str) -> None:
        if uri and uri not in self.uris:
            self.uris.append(uri)

    def link_authority(self, authority_id: str) -> None:
        if authority_id and authority_id not in self.authority_ids:
            self.authority_ids.append(authority_id)

    def set_range(self, terminus: int) -> None:
        self.range_terminus = terminus

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "dot_notation": self.dot_notation,
            "n": self.number,
            "identifier": self.identifier,
            "asn1_notation": self.asn1_notation,
        }
        if self.description:
            result["description"] = self.description
        if self.info:
            result["info"] = list(self.info)
        if self.obsolete:
            result["status"] = self.status.value
        if self.uris:
            result["uri"] = list(self.uris)
        if self.range_terminus is not None:
            result["range"] = self.range_terminus
        if self.authority_ids:
            result["authorities"] = list(self.authority_ids)
        if not self.contact.is_empty():
            result["contact"] = self.contact.to_dict()
        return result


class OIDTree:
    """The three OID roots and everything allocated beneath them."""

    def __init__(self) -> None:
        roots = []
        for number, name in enumerate(ROOT_NAMES):
            root = Node(number)
            root.set_identifier(name)
            roots.append(root)
        self._roots: tuple[Node, ...] = tuple(roots)
        self._primed: set[int] = set()
        self._count = len(roots)

    def __len__(self) -> int:
        return self._count

    @property
    def node_count(self) -> int:
        return self._count

    # -- Roots ----------------------------------------------------------------

    @property
    def roots(self) -> tuple[Node, ...]:
        return self._roots

    def root(self, key: int | str) -> Node:
        """Return a root by index (0, 1, 2) or name."""
        if isinstance(key, str):
            if key not in ROOT_NAMES:
                raise KeyError(f"Unknown root: {key}")
            key = ROOT_NAMES.index(key)
        if not 0 <= key <= 2:
            raise KeyError(f"Root index must be 0, 1 or 2: {key}")
        return self._roots[key]

    @property
    def itu_t(self) -> Node:
        return self._roots[0]

    @property
    def iso(self) -> Node:
        return self._roots[1]

    @property
    def joint_iso_itu_t(self) -> Node:
        return self._roots[2]

    # -- Priming --------------------------------------------------------------

    def is_primed(self, root: int | str) -> bool:
        return self.root(root).number in self._primed

    def prime(self, root: int | str, notations: Iterable[str]) -> int:
        """Allocate a catalogue of ASN.1 notations beneath one root.

        Name forms become node identifiers (existing identifiers are kept).
        Returns the number of notations applied.
        """
        base = self.root(root)
        applied = 0
        for notation in notations:
            arcs = parse_asn1(notation)
            name, number = arcs[0]
            if number != base.number or (name and name != base.identifier):
                raise MalformedPathError(f"{notation} is not beneath {base.identifier}({base.number})")
            node = base
            for ident, number in arcs[1:]:
                node = self._get_or_create(node, number)
                if ident:
                    node.set_identifier(ident)
            applied += 1
        self._primed.add(base.number)
        logger.debug("Primed %s with %d notations", base.identifier, applied)
        return applied

    # -- Allocation and lookup ------------------------------------------------

    def allocate(self, path: str | Sequence[int]) -> Node:
        """Return the node at *path*, creating it and missing ancestors.

        Raises MalformedPathError for a malformed path and
        TreeNotPrimedError when the target root was never primed.
        """
        arcs = to_arcs(path)
        if arcs[0] not in self._primed:
            raise TreeNotPrimedError(
                f"tree not primed: root {ROOT_NAMES[arcs[0]]} must be primed before allocating {to_dot(arcs)}"
            )
        node = self._roots[arcs[0]]
        for number in arcs[1:]:
            node = self._get_or_create(node, number)
        return node

    def lookup(self, path: str | Sequence[int]) -> Node | None:
        """Return the node at *path*, or None. Never creates."""
        arcs = to_arcs(path)
        node: Node | None = self._roots[arcs[0]]
        for number in arcs[1:]:
            node = node.child(number)
            if node is None:
                return None
        return node

    def _get_or_create(self, parent: Node, number: int) -> Node:
        node = parent.child(number)
        if node is None:
            node = parent._add_child(number)
            self._count += 1
        return node

    # -- Traversal ------------------------------------------------------------

    def sort_by_number(self) -> None:
        for root in self._roots:
            root.sort_by_number(recursive=True)

    def walk(self) -> Iterator[Node]:
        """Pre-order traversal of all three roots."""
        for root in self._roots:
            yield from root.iter_subtree()
