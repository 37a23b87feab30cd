"""
RADIT (Registration Authority Directory Information Tree)
OID tree assembly from the IANA SMI, LDAP and PEN registries
"""

__version__ = "0.1.0"
__author__ = "RADIT Team"

from radit.authority import Authority, AuthorityRegistry, ContactPolicy
from radit.builder import RADIT, ImportList
from radit.config import RADITConfig, get_config
from radit.export import JSONSerializer, export_to_json
from radit.tree import Node, NodeStatus, OIDTree

__all__ = [
    "Authority",
    "AuthorityRegistry",
    "ContactPolicy",
    "ImportList",
    "JSONSerializer",
    "Node",
    "NodeStatus",
    "OIDTree",
    "RADIT",
    "RADITConfig",
    "export_to_json",
    "get_config",
]
