"""
Tree serialization

The assembly engine never formats output itself; it hands the finished
tree and authority set to a serializer. JSONSerializer is the default
one. Anything with a matching ``write`` method can replace it.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

from radit.authority import AuthorityRegistry, ContactPolicy
from radit.tree import OIDTree
from radit.utils import get_logger

logger = get_logger(__name__)


class Serializer(Protocol):
    def write(self, tree: OIDTree, authorities: AuthorityRegistry, policy: ContactPolicy) -> str:
        ...


class JSONSerializer:
    """Render registrations in pre-order, plus registrants when dedicated."""

    def __init__(self, indent: int | None = 2) -> None:
        self.indent = indent

    def to_dict(self, tree: OIDTree, authorities: AuthorityRegistry, policy: ContactPolicy) -> dict[str, Any]:
        data: dict[str, Any] = {
            "contact_policy": policy.value,
            "registration_count": tree.node_count,
            "registrations": [node.to_dict() for node in tree.walk()],
        }
        if policy is ContactPolicy.dedicated:
            data["registrant_count"] = len(authorities)
            data["registrants"] = authorities.to_list()
        return data

    def write(self, tree: OIDTree, authorities: AuthorityRegistry, policy: ContactPolicy) -> str:
        return json.dumps(self.to_dict(tree, authorities, policy), indent=self.indent, ensure_ascii=False)


def export_to_json(
    tree: OIDTree,
    authorities: AuthorityRegistry,
    policy: ContactPolicy,
    output_path: str | Path = "data/exports/radit.json",
) -> Path:
    """
    Write the tree and authorities to a JSON file

    Args:
        tree: Assembled OID tree
        authorities: Authorities gathered during import
        policy: Contact policy the tree was built with
        output_path: Output file path
    """
    output_path = Path(output_path)
    logger.info(f"Exporting tree to JSON: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(JSONSerializer().write(tree, authorities, policy), encoding="utf-8")

    logger.info(f"✓ Exported {tree.node_count} registrations to {output_path}")
    return output_path
