"""Registration authorities (contacts) and their attachment to nodes.

An :class:`Authority` is created at most once per source key and kept in
first-encounter order. Nodes never own authorities: under the
*dedicated* policy they carry the authority id, under the *combined*
policy the contact fields are copied onto the node itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterator

from radit.tree import Node
from radit.utils import generate_authority_id, unescape_email

logger = logging.getLogger(__name__)

MAILTO_PREFIX = "mailto:"
DEFAULT_ORGANIZATION = "IANA"


class ContactPolicy(str, Enum):
    """How authority data reaches the nodes it is responsible for."""
    dedicated = "dedicated"
    combined = "combined"


@dataclass
class Authority:
    """A person or organization responsible for one or more registrations."""

    key: str
    authority_id: str = ""
    name: str = ""
    o: str = ""
    cn: str = ""
    email: str = ""
    uri: str = ""
    nodes: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.authority_id:
            self.authority_id = generate_authority_id(self.key)

    def set_uri(self, uri: str) -> None:
        """Store a source URI; ``mailto:`` links become an email address."""
        if not uri:
            return
        if uri.startswith(MAILTO_PREFIX):
            self.email = unescape_email(uri[len(MAILTO_PREFIX):])
        else:
            self.uri = uri

    def to_dict(self) -> dict[str, Any]:
        result = {
            "authority_id": self.authority_id,
            "key": self.key,
            "name": self.name,
            "o": self.o,
            "cn": self.cn,
            "email": self.email,
            "uri": self.uri,
            "registrations": list(self.nodes),
        }
        return {k: v for k, v in result.items() if v}


class AuthorityRegistry:
    """Deduplicating store of authorities keyed by their source token."""

    def __init__(self, organization_literal: str = DEFAULT_ORGANIZATION) -> None:
        self.organization_literal = organization_literal
        self._by_key: dict[str, Authority] = {}
        self._ordered: list[Authority] = []

    def __len__(self) -> int:
        return len(self._ordered)

    def __iter__(self) -> Iterator[Authority]:
        return iter(self._ordered)

    def __contains__(self, key: str) -> bool:
        return key in self._by_key

    def get(self, key: str) -> Authority | None:
        return self._by_key.get(key)

    def get_or_create(
        self,
        key: str,
        populate: Callable[[Authority], None] | None = None,
    ) -> Authority:
        """Return the authority for *key*, creating and populating it once."""
        authority = self._by_key.get(key)
        if authority is not None:
            return authority

        authority = Authority(key=key)
        if populate is not None:
            populate(authority)
        self._by_key[key] = authority
        self._ordered.append(authority)
        return authority

    # -- Populators -----------------------------------------------------------

    def populate_person(self, name: str, uri: str = "") -> Callable[[Authority], None]:
        """Populator for a registry ``<person>`` entry."""

        def populate(authority: Authority) -> None:
            authority.name = name
            authority.set_uri(uri)
            if not name:
                return
            if name == self.organization_literal:
                authority.o = name
            else:
                authority.cn = name

        return populate

    def populate_expert(self, text: str) -> Callable[[Authority], None]:
        """Populator for one entry of a registry ``<expert>`` list.

        ``Jane Doe (Example Corp)`` yields cn ``Jane Doe`` and o
        ``IANA, Example Corp``; a bare name gets o ``IANA``.
        """

        def populate(authority: Authority) -> None:
            name = " ".join(text.split())
            org = self.organization_literal
            idx = name.find(" (")
            if idx != -1:
                org = f"{self.organization_literal}, {name[idx + 2:].rstrip(')')}"
                name = name[:idx]
            authority.name = name
            authority.cn = name
            authority.o = org

        return populate

    # -- Attachment -----------------------------------------------------------

    def attach(self, node: Node, authority: Authority, policy: ContactPolicy) -> None:
        """Attach *authority* to *node* according to *policy*."""
        if node.dot_notation not in authority.nodes:
            authority.nodes.append(node.dot_notation)

        if policy is ContactPolicy.dedicated:
            node.link_authority(authority.authority_id)
            return

        contact = node.contact
        for attr in ("o", "cn", "email", "uri"):
            value = getattr(authority, attr)
            if value:
                setattr(contact, attr, value)
        if authority.name and not node.description:
            node.description = authority.name

    def to_list(self) -> list[dict[str, Any]]:
        return [a.to_dict() for a in self._ordered]
