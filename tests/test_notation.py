"""Tests for dot / ASN.1 notation conversions and the identifier grammar."""

import pytest

from radit.notation import (
    asn1_to_arcs,
    build_asn1,
    build_urn_notation,
    is_identifier,
    is_numeric_oid,
    parse_asn1,
    parse_dot,
    to_arcs,
    to_dot,
)
from radit.utils import MalformedPathError


class TestIdentifierGrammar:
    @pytest.mark.parametrize("value", ["iso", "mib-2", "snmpV2", "a", "oid-directory", "x25"])
    def test_valid(self, value):
        assert is_identifier(value)

    @pytest.mark.parametrize("value", ["", "Iso", "2abc", "a--b", "trailing-", "with space", "a_b", "a.b"])
    def test_invalid(self, value):
        assert not is_identifier(value)


class TestNumericOid:
    @pytest.mark.parametrize("value", ["1.3", "1.3.6.1.4.1.56521", "2.0", "0.9.2342"])
    def test_valid(self, value):
        assert is_numeric_oid(value)

    @pytest.mark.parametrize("value", ["1", "3.1", "1.03", "1..3", "1.3.", "abc", ""])
    def test_invalid(self, value):
        assert not is_numeric_oid(value)


class TestDotNotation:
    def test_parse_dot(self):
        assert parse_dot("1.3.6.1") == (1, 3, 6, 1)

    def test_round_trip(self):
        assert to_dot(parse_dot("1.3.6.1.4.1.56521")) == "1.3.6.1.4.1.56521"

    @pytest.mark.parametrize("value", ["", "1..3", "1.a.3", "1.-3"])
    def test_malformed(self, value):
        with pytest.raises(MalformedPathError):
            parse_dot(value)

    def test_to_arcs_accepts_sequences(self):
        assert to_arcs([1, 3, 6]) == (1, 3, 6)

    def test_to_arcs_rejects_bad_root(self):
        with pytest.raises(MalformedPathError):
            to_arcs("3.1")

    def test_to_arcs_rejects_empty_and_negative(self):
        with pytest.raises(MalformedPathError):
            to_arcs([])
        with pytest.raises(MalformedPathError):
            to_arcs([1, -3])

    def test_malformed_path_is_value_error(self):
        with pytest.raises(ValueError):
            to_arcs("x")


class TestASN1Notation:
    def test_parse_mixed_forms(self):
        arcs = parse_asn1("{iso(1) identified-organization(3) 6 internet(1)}")
        assert arcs == [("iso", 1), ("identified-organization", 3), (None, 6), ("internet", 1)]

    def test_missing_closing_brace_tolerated(self):
        assert asn1_to_arcs("{itu-t(0) recommendation(0)") == (0, 0)

    def test_bad_token(self):
        with pytest.raises(MalformedPathError):
            parse_asn1("{iso(1) bad-token}")

    def test_empty(self):
        with pytest.raises(MalformedPathError):
            parse_asn1("{}")

    def test_build_is_inverse_of_parse(self):
        notation = "{iso(1) identified-organization(3) dod(6) internet(1) 4}"
        assert build_asn1(parse_asn1(notation)) == notation


class TestURNNotation:
    def test_org_becomes_identified_organization(self):
        assert (
            build_urn_notation(["1", "3", "6", "1"], ["iso", "org", "dod", "internet"])
            == "{iso(1) identified-organization(3) dod(6) internet(1)}"
        )

    def test_length_mismatch_returns_empty(self):
        assert build_urn_notation(["1", "3"], ["iso"]) == ""

    def test_numeric_label_yields_number_form(self):
        assert build_urn_notation([1, 3, 6], ["iso", "org", "6"]) == "{iso(1) identified-organization(3) 6}"

    def test_org_only_rewritten_in_second_position(self):
        assert build_urn_notation([1, 9], ["org", "x"]) == "{org(1) x(9)}"
