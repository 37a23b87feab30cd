"""Read-only curated data: the priming catalogue and the source fix-up tables.

Both files are loaded once (YAML) and validated with pydantic. The
resulting models are frozen and their mappings are wrapped in
``MappingProxyType`` so that the loaders can share them without being
able to alter them.
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from radit.utils import SourceReadError

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
DEFAULT_PRIMING_PATH = DATA_DIR / "priming.yaml"
DEFAULT_CURATED_PATH = DATA_DIR / "curated.yaml"

# Enterprise number of the OID Directory project. Its registrations are
# maintained by hand and are not part of the PEN text file.
OID_DIRECTORY_PEN = 56521


class PrimingCatalogue(BaseModel):
    """ASN.1 notations pre-allocated under each root before any import."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    itu_t: tuple[str, ...] = Field(default=(), alias="itu-t")
    iso: tuple[str, ...] = ()
    joint_iso_itu_t: tuple[str, ...] = Field(default=(), alias="joint-iso-itu-t")

    def for_root(self, root: int) -> tuple[str, ...]:
        return (self.itu_t, self.iso, self.joint_iso_itu_t)[root]


class CuratedData(BaseModel):
    """Hand-maintained corrections for gaps in the IANA sources.

    identifier_exceptions:
        raw record name -> legal identifier, for names no heuristic fixes.
    missing_record_names:
        parent dot notation -> {leaf number -> name} for records that ship
        without a name.
    missing_registry_descriptions:
        registry id -> replacement description carrying the registry OID.
    enterprise_supplements:
        enterprise number -> ASN.1 notations loaded beneath that number.
    """

    model_config = ConfigDict(frozen=True)

    identifier_exceptions: Mapping[str, str] = Field(default_factory=dict)
    missing_record_names: Mapping[str, Mapping[str, str]] = Field(default_factory=dict)
    missing_registry_descriptions: Mapping[str, str] = Field(default_factory=dict)
    enterprise_supplements: Mapping[int, tuple[str, ...]] = Field(default_factory=dict)

    @field_validator(
        "identifier_exceptions",
        "missing_registry_descriptions",
        "enterprise_supplements",
        mode="after",
    )
    @classmethod
    def _read_only(cls, v: Mapping[Any, Any]) -> Mapping[Any, Any]:
        return MappingProxyType(dict(v))

    @field_validator("missing_record_names", mode="after")
    @classmethod
    def _read_only_nested(cls, v: Mapping[str, Mapping[str, str]]) -> Mapping[str, Mapping[str, str]]:
        return MappingProxyType({k: MappingProxyType(dict(inner)) for k, inner in v.items()})

    def missing_record_name(self, parent_dot: str, leaf: str) -> str:
        """Return the curated name for an unnamed record, or ''."""
        return self.missing_record_names.get(parent_dot, {}).get(leaf, "")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise SourceReadError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise SourceReadError(f"Malformed YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise SourceReadError(f"{path} must contain a mapping at the top level")
    return data


def load_priming(path: Path | str | None = None) -> PrimingCatalogue:
    """Load the priming catalogue (defaults to the packaged one)."""
    path = Path(path) if path else DEFAULT_PRIMING_PATH
    try:
        catalogue = PrimingCatalogue.model_validate(_read_yaml(path))
    except ValidationError as e:
        raise SourceReadError(f"Invalid priming catalogue {path}: {e}") from e
    logger.debug(
        "Loaded priming catalogue from %s (%d/%d/%d notations)",
        path, len(catalogue.itu_t), len(catalogue.iso), len(catalogue.joint_iso_itu_t),
    )
    return catalogue


def load_curated(path: Path | str | None = None) -> CuratedData:
    """Load the curated fix-up tables (defaults to the packaged ones)."""
    path = Path(path) if path else DEFAULT_CURATED_PATH
    try:
        curated = CuratedData.model_validate(_read_yaml(path))
    except ValidationError as e:
        raise SourceReadError(f"Invalid curated data {path}: {e}") from e
    logger.debug(
        "Loaded curated data from %s (%d identifier exceptions)",
        path, len(curated.identifier_exceptions),
    )
    return curated
