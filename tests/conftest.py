"""Shared test fixtures for the RADIT test suite."""

import pytest

from radit.authority import AuthorityRegistry
from radit.catalog import load_curated, load_priming
from radit.tree import OIDTree


SMI_XML = """<?xml version='1.0' encoding='UTF-8'?>
<registry xmlns="http://www.iana.org/assignments" id="smi-numbers">
  <title>Structure of Management Information (SMI) Numbers</title>
  <updated>2024-01-01</updated>
  <registry id="smi-numbers-0">
    <title>Prefix</title>
    <record>
      <value>2</value>
      <name>mgmt</name>
      <description>Management</description>
    </record>
  </registry>
  <registry id="smi-numbers-3">
    <title>Network Management Parameters</title>
    <description>Prefix: iso.org.dod.internet.mgmt.mib-2 (1.3.6.1.2.1)</description>
    <registration_rule>Expert Review</registration_rule>
    <expert>Jane Expert (Example Corp)</expert>
    <xref type="rfc" data="rfc1213"/>
    <note>See <xref type="rfc" data="rfc3418"/> for details.</note>
    <note title="Assignments"><xref type="uri" data="https://example.org/list"/></note>
    <record>
      <value>1</value>
      <name>system</name>
      <description>System group</description>
      <xref type="rfc" data="rfc1213"/>
      <xref type="person" data="Alice_Smith"/>
    </record>
    <record>
      <value>2</value>
      <name>snmp_v2</name>
    </record>
    <record>
      <value>3</value>
      <name>IEEE802.4</name>
    </record>
    <record>
      <value>4</value>
      <name>retired</name>
      <xref type="note" data="1"/>
    </record>
    <record>
      <value>5</value>
      <name>ip</name>
      <xref type="text">Reassigned</xref>
      <xref type="note" data="1"/>
      <xref type="rfc" data="rfc4293"/>
    </record>
    <record>
      <value>10-12</value>
      <name>reserved-block</name>
    </record>
    <record>
      <value>100 and up</value>
      <name>Unassigned</name>
    </record>
    <record>
      <value>bogus</value>
      <name>broken</name>
    </record>
    <registry id="smi-numbers-3-1">
      <title>Separately Distributed</title>
      <description>Maintained in its own file</description>
      <record>
        <value>7</value>
        <name>ignored</name>
      </record>
    </registry>
  </registry>
  <people>
    <person id="Alice_Smith">
      <name>Alice Smith</name>
      <uri>mailto:alice&amp;example.com</uri>
    </person>
    <person id="IANA">
      <name>IANA</name>
      <uri>mailto:iana&amp;iana.org</uri>
    </person>
  </people>
</registry>
"""


LDAP_XML = """<?xml version='1.0' encoding='UTF-8'?>
<registry xmlns="http://www.iana.org/assignments" id="ldap-parameters">
  <title>Lightweight Directory Access Protocol (LDAP) Parameters</title>
  <registry id="ldap-parameters-3">
    <title>Object Identifiers</title>
    <record>
      <value>1.3.6.1.1.1</value>
      <name>nisSchema</name>
      <description>NIS schema</description>
      <xref type="rfc" data="rfc2307"/>
    </record>
    <record>
      <value>1.3.6.1.1.4</value>
      <name></name>
      <description>vendor name</description>
      <xref type="person" data="IANA"/>
    </record>
  </registry>
  <people>
    <person id="IANA">
      <name>IANA</name>
      <uri>mailto:iana&amp;iana.org</uri>
    </person>
  </people>
</registry>
"""


PEN_HEADER = [
    "",
    "PRIVATE ENTERPRISE NUMBERS",
    "",
    "(last updated 2024-01-01)",
    "",
    "SMI Network Management Private Enterprise Codes:",
    "",
    "Prefix: iso.org.dod.internet.private.enterprise (1.3.6.1.4.1)",
    "",
    "This file is https://www.iana.org/assignments/enterprise-numbers.txt",
    "",
    "Decimal",
    "| Organization",
    "| | Contact",
    "| | | Email",
    "| | | |",
]

PEN_BODY = """0
  Reserved
    Internet Assigned Numbers Authority
      iana&iana.org
2
  IBM
    Glenn Daly
      gdaly&us.ibm.com

56521
  ACME
    Jane Doe
      jane&acme.example

12345
  ---none---
    ---none---
      ---none---
"""


@pytest.fixture
def primed_tree():
    """A tree with all three roots primed from the packaged catalogue."""
    tree = OIDTree()
    catalogue = load_priming()
    for root in range(3):
        tree.prime(root, catalogue.for_root(root))
    return tree


@pytest.fixture
def curated():
    return load_curated()


@pytest.fixture
def authorities():
    return AuthorityRegistry()


@pytest.fixture
def smi_xml():
    return SMI_XML


@pytest.fixture
def smi_file(tmp_path):
    path = tmp_path / "smi-numbers.xml"
    path.write_bytes(SMI_XML.encode("utf-8"))
    return path


@pytest.fixture
def ldap_file(tmp_path):
    path = tmp_path / "ldap-parameters.xml"
    path.write_bytes(LDAP_XML.encode("utf-8"))
    return path


@pytest.fixture
def pen_text():
    return "\n".join(PEN_HEADER) + "\n" + PEN_BODY


@pytest.fixture
def pen_file(tmp_path, pen_text):
    path = tmp_path / "enterprise-numbers.txt"
    path.write_text(pen_text, encoding="utf-8")
    return path
