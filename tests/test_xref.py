"""Tests for cross-reference classification."""

import pytest

from radit.authority import ContactPolicy
from radit.tree import Node
from radit.xref import (
    RFC_ERRATA_PREFIX,
    RFC_URI_PREFIX,
    CrossReferenceClassifier,
    XRef,
    XRefKind,
)


@pytest.fixture
def classifier(authorities):
    return CrossReferenceClassifier(authorities, ContactPolicy.dedicated)


class TestXRefKind:
    @pytest.mark.parametrize(
        "type_name,kind",
        [
            ("rfc", XRefKind.rfc),
            ("draft", XRefKind.draft),
            ("rfc-errata", XRefKind.rfc_errata),
            ("uri", XRefKind.uri),
            ("note", XRefKind.note),
            ("text", XRefKind.text),
            ("registry", XRefKind.registry),
            ("person", XRefKind.person),
            ("RFC", XRefKind.rfc),
        ],
    )
    def test_parse(self, type_name, kind):
        assert XRefKind.parse(type_name) is kind

    @pytest.mark.parametrize("type_name", ["", "fax", "unrecognized-ish"])
    def test_unknown_type(self, type_name):
        assert XRefKind.parse(type_name) is XRefKind.unrecognized

    def test_every_kind_has_a_handler(self, classifier):
        for kind in XRefKind:
            assert callable(classifier.handler_for(kind))


class TestHandlers:
    def test_rfc(self, classifier):
        node = Node(1)
        classifier.apply(XRef.from_fields("rfc", "rfc1213"), node)
        assert node.uris == [f"{RFC_URI_PREFIX}rfc1213 RFC1213"]

    def test_draft(self, classifier):
        node = Node(1)
        classifier.apply(XRef.from_fields("draft", "draft-ietf-foo"), node)
        assert node.uris == [f"{RFC_URI_PREFIX}draft-ietf-foo DRAFT-IETF-FOO"]

    def test_errata(self, classifier):
        node = Node(1)
        classifier.apply(XRef.from_fields("rfc-errata", "4321"), node)
        assert node.uris == [f"{RFC_ERRATA_PREFIX}4321 Errata ID 4321"]

    def test_uri_with_and_without_label(self, classifier):
        node = Node(1)
        classifier.apply(XRef.from_fields("uri", "https://a.example", "  Label\n text "), node)
        classifier.apply(XRef.from_fields("uri", "https://b.example"), node)
        assert node.uris == ["https://a.example Label text", "https://b.example"]

    def test_note_code_one_marks_obsolete(self, classifier):
        node = Node(1)
        classifier.apply(XRef.from_fields("note", "1"), node)
        assert node.obsolete

    def test_other_note_is_info(self, classifier):
        node = Node(1)
        classifier.apply(XRef.from_fields("note", "2"), node)
        assert not node.obsolete
        assert node.info == ["2"]

    def test_text(self, classifier):
        node = Node(1)
        classifier.apply(XRef.from_fields("text", "", "Not Defined ?"), node)
        classifier.apply(XRef.from_fields("text", "", ""), node)
        classifier.apply(XRef.from_fields("text", "", "Reserved"), node)
        assert node.info == ["Reserved"]
        classifier.apply(XRef.from_fields("text", "", "Obsolete"), node)
        assert node.obsolete

    def test_registry_content_is_info(self, classifier):
        node = Node(1)
        classifier.apply(XRef.from_fields("registry", "smi-numbers", "SMI Numbers"), node)
        assert node.info == ["SMI Numbers"]

    def test_person_links_known_authority(self, classifier, authorities):
        alice = authorities.get_or_create("Alice", authorities.populate_person("Alice Smith"))
        node = Node(1)
        classifier.apply(XRef.from_fields("person", "Alice"), node)
        classifier.apply(XRef.from_fields("person", "Nobody"), node)
        assert node.authority_ids == [alice.authority_id]

    def test_unrecognized_is_noop(self, classifier):
        node = Node(1)
        classifier.apply(XRef.from_fields("fax", "555-1234", "call me"), node)
        assert node.uris == [] and node.info == [] and not node.obsolete

    def test_apply_all_stops_once_obsolete(self, classifier):
        node = Node(1)
        xrefs = [
            XRef.from_fields("text", "", "Reassigned"),
            XRef.from_fields("note", "1"),
            XRef.from_fields("rfc", "rfc4293"),
        ]
        classifier.apply_all(xrefs, node)
        assert node.obsolete
        assert node.info == ["Reassigned"]
        assert node.uris == []


class TestXRef:
    def test_marks_obsolete(self):
        assert XRef.from_fields("note", "1").marks_obsolete
        assert XRef.from_fields("text", "", " obsolete ").marks_obsolete
        assert not XRef.from_fields("note", "2").marks_obsolete
        assert not XRef.from_fields("rfc", "1").marks_obsolete

    def test_with_kind(self):
        xref = XRef.from_fields("registry", "smi-numbers").with_kind(XRefKind.uri, data="https://x/smi-numbers")
        assert xref.kind is XRefKind.uri
        assert xref.data == "https://x/smi-numbers"
