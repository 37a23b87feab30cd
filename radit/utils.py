"""
Utility functions for RADIT

Provides logging setup, deterministic ID generation, whitespace helpers
and the exception hierarchy shared by the loaders and the tree store.
"""

import hashlib
import logging
from pathlib import Path
from typing import Optional


# ═══════════════════════════════════════════════════════════════════
# LOGGING
# ═══════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO", log_file: Optional[str | Path] = None) -> None:
    """Configure logging for RADIT"""
    level = getattr(logging, log_level.upper())

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers
    )


def get_logger(name: str) -> logging.Logger:
    """Get logger instance for module"""
    return logging.getLogger(name)


# ═══════════════════════════════════════════════════════════════════
# ID GENERATION
# ═══════════════════════════════════════════════════════════════════

def generate_authority_id(key: str) -> str:
    """Generate deterministic ID for an authority source key"""
    id_string = f"authority:{key}"
    return hashlib.md5(id_string.encode()).hexdigest()[:16]


# ═══════════════════════════════════════════════════════════════════
# TEXT NORMALIZATION
# ═══════════════════════════════════════════════════════════════════

def condense_whitespace(text: str) -> str:
    """Collapse runs of whitespace (newlines included) into single spaces"""
    if not text:
        return ""
    return " ".join(text.split())


def is_number(value: str) -> bool:
    """True when value is a non-empty run of ASCII digits"""
    return bool(value) and value.isascii() and value.isdigit()


def unescape_email(value: str) -> str:
    """Undo the IANA email escaping ('&' for '@', '%25' for '%')"""
    return value.replace("&", "@").replace("%25", "%")


# ═══════════════════════════════════════════════════════════════════
# EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════

class RADITError(Exception):
    """Base exception for RADIT"""
    pass


class StructuralError(RADITError):
    """Fatal error; aborts the whole import"""
    pass


class TreeNotPrimedError(StructuralError):
    """Allocation attempted beneath a root or arc that was never primed"""
    pass


class MalformedPathError(StructuralError, ValueError):
    """Numeric path or notation that cannot be turned into arcs"""
    pass


class PathMismatchError(StructuralError):
    """Allocated node disagrees with the path derived from the source"""
    pass


class SourceReadError(StructuralError):
    """Registry file missing or unreadable"""
    pass


class DocumentError(StructuralError):
    """Registry document is malformed at the top level"""
    pass


class RecordValueError(RADITError):
    """Single record value that is not a number, range or dotted path"""
    pass


class InvalidIdentifierError(RADITError, ValueError):
    """Identifier that does not satisfy the X.680 identifier grammar"""
    pass
