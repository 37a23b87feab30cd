"""Best-effort conversion of registry record names into X.680 identifiers.

Record names in the IANA registries are free text: ``IEEE802.4``,
``snmp_v2``, ``retained by foo``, ``mib-2 (Junk)``. The legalizer runs a
fixed cascade of heuristics and returns the first grammar-valid result,
or an empty string. A valid result is not necessarily a meaningful one.
"""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import Mapping

from radit.notation import is_identifier

logger = logging.getLogger(__name__)

_RETAINED_BY_RE = re.compile(r"retained\s+by\s+(.+)$", re.IGNORECASE)


class IdentifierLegalizer:
    """Legalize candidate identifiers against a curated exception table."""

    def __init__(self, exceptions: Mapping[str, str] | None = None) -> None:
        self._exceptions = MappingProxyType(dict(exceptions or {}))

    def legalize(self, candidate: str) -> str:
        """Return a grammar-valid identifier derived from *candidate*, or ''."""
        candidate = (candidate or "").strip()
        if not candidate:
            return ""

        if is_identifier(candidate):
            return candidate

        # Re-allocated arcs read "retained by <name>"
        match = _RETAINED_BY_RE.search(candidate)
        if match:
            retained = self.legalize(match.group(1))
            if retained:
                return retained

        override = self._exceptions.get(candidate)
        if override and is_identifier(override):
            return override

        tokens = candidate.split()
        if len(tokens) > 1:
            # "name (Junk)": one of the tokens may be usable on its own
            for token in tokens:
                tried = self.legalize(token)
                if tried:
                    return tried
            logger.debug("No legal identifier in %r", candidate)
            return ""

        tweaked = candidate.lower().replace("_", "-")
        if is_identifier(tweaked):
            return tweaked

        # A dotted OID never survives this; dotted names such as
        # IEEE802.4 do.
        tweaked = candidate.lower().replace(".", "")
        if is_identifier(tweaked):
            return tweaked

        logger.debug("No legal identifier for %r", candidate)
        return ""
