"""Assembly driver: prime the skeleton, import registries, hand off the tree.

Typical use::

    dit = RADIT(ContactPolicy.dedicated)
    dit.prime_all()
    dit.import_registries(ImportList(smi_file="smi-numbers.xml", pen_file="enterprise-numbers.txt"))
    content = dit.write()

Imports are applied strictly one after another (SMI, then LDAP, then
PEN) because they may allocate overlapping subtrees.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Sequence

from radit.authority import AuthorityRegistry, ContactPolicy
from radit.catalog import CuratedData, PrimingCatalogue, load_curated, load_priming
from radit.config import RADITConfig
from radit.export import JSONSerializer, Serializer
from radit.ingestion.pen import DEFAULT_HEADER_LINES, PenRegistryLoader
from radit.ingestion.smi import SMIRegistryLoader
from radit.legalize import IdentifierLegalizer
from radit.tree import Node, OIDTree
from radit.utils import RADITError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportList:
    """Registry files to import; any of them may be omitted."""

    smi_file: Path | None = None
    ldap_file: Path | None = None
    pen_file: Path | None = None

    # Accepted keys for from_mapping
    KEYS = {"smifile": "smi_file", "ldapfile": "ldap_file", "penfile": "pen_file"}

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str | Path]) -> ImportList:
        """Build from ``{"smifile": ..., "ldapfile": ..., "penfile": ...}``."""
        unknown = set(mapping) - set(cls.KEYS)
        if unknown:
            raise ValueError(f"Unknown import keys: {sorted(unknown)}")
        return cls(**{cls.KEYS[k]: Path(v) for k, v in mapping.items() if v})

    def is_empty(self) -> bool:
        return not (self.smi_file or self.ldap_file or self.pen_file)


@dataclass
class ImportSummary:
    sources: list[str] = field(default_factory=list)
    registrations: int = 0
    authorities: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "sources": list(self.sources),
            "registrations": self.registrations,
            "authorities": self.authorities,
        }


class RADIT:
    """In-memory registration authority DIT assembled from IANA registries."""

    def __init__(
        self,
        policy: ContactPolicy = ContactPolicy.dedicated,
        priming: PrimingCatalogue | None = None,
        curated: CuratedData | None = None,
        organization_literal: str = "IANA",
        pen_header_lines: int = DEFAULT_HEADER_LINES,
    ) -> None:
        self.policy = ContactPolicy(policy)
        self.priming = priming if priming is not None else load_priming()
        self.curated = curated if curated is not None else load_curated()
        self.pen_header_lines = pen_header_lines

        self.tree = OIDTree()
        self.authorities = AuthorityRegistry(organization_literal)
        self.legalizer = IdentifierLegalizer(self.curated.identifier_exceptions)

    @classmethod
    def from_config(cls, config: RADITConfig) -> RADIT:
        return cls(
            policy=config.contact_policy,
            priming=load_priming(config.priming_path),
            curated=load_curated(config.curated_path),
            organization_literal=config.organization_literal,
            pen_header_lines=config.pen_header_lines,
        )

    # -- Priming --------------------------------------------------------------

    def prime(self, root: int | str, notations: Sequence[str] | None = None) -> int:
        """Prime one root, with the packaged catalogue unless *notations* is given."""
        base = self.tree.root(root)
        if notations is None:
            notations = self.priming.for_root(base.number)
        return self.tree.prime(base.number, notations)

    def prime_itu_t(self) -> int:
        return self.prime(0)

    def prime_iso(self) -> int:
        return self.prime(1)

    def prime_joint_iso_itu_t(self) -> int:
        return self.prime(2)

    def prime_all(self) -> int:
        count = self.prime_itu_t() + self.prime_iso() + self.prime_joint_iso_itu_t()
        logger.info("Primed %d well-known registrations (%d nodes)", count, self.tree.node_count)
        return count

    # -- Import ---------------------------------------------------------------

    def smi_loader(self) -> SMIRegistryLoader:
        return SMIRegistryLoader(self.tree, self.authorities, self.policy, self.legalizer, self.curated)

    def pen_loader(self) -> PenRegistryLoader:
        return PenRegistryLoader(self.tree, self.authorities, self.policy, self.curated)

    def import_smi(self, path: Path | str) -> None:
        self.smi_loader().load(path)

    def import_ldap(self, path: Path | str) -> None:
        # Same XML layout as the SMI Numbers registry
        self.smi_loader().load(path)

    def import_pen(self, path: Path | str) -> None:
        self.pen_loader().load(path, header_lines=self.pen_header_lines)

    def import_registries(self, imports: ImportList) -> ImportSummary:
        """Import the listed registries in fixed order.

        The first fatal error stops the run and is re-raised unchanged;
        whatever was already allocated stays in the tree.
        """
        summary = ImportSummary()
        if imports.is_empty():
            logger.warning("Import list is empty; nothing to import")
            return summary

        steps = (
            ("smi", imports.smi_file, self.import_smi),
            ("ldap", imports.ldap_file, self.import_ldap),
            ("pen", imports.pen_file, self.import_pen),
        )
        for name, path, step in steps:
            if path is None:
                continue
            logger.info("Importing %s registry from %s", name, path)
            try:
                step(path)
            except RADITError as e:
                logger.error("Import of %s aborted: %s", path, e)
                raise
            summary.sources.append(str(path))

        summary.registrations = self.tree.node_count
        summary.authorities = len(self.authorities)
        return summary

    # -- Output ---------------------------------------------------------------

    def lookup(self, path: str | Sequence[int]) -> Node | None:
        return self.tree.lookup(path)

    def sort(self) -> None:
        self.tree.sort_by_number()

    def write(self, serializer: Serializer | None = None, sort_by_number: bool = True) -> str:
        """Sort (optionally) and serialize the whole tree."""
        if sort_by_number:
            self.sort()
        serializer = serializer or JSONSerializer()
        return serializer.write(self.tree, self.authorities, self.policy)
