"""Tests for the authority registry and contact policies."""

from radit.authority import Authority, AuthorityRegistry, ContactPolicy
from radit.tree import Node
from radit.utils import generate_authority_id


class TestAuthority:
    def test_id_is_deterministic(self):
        assert Authority(key="Alice").authority_id == generate_authority_id("Alice")
        assert Authority(key="Alice").authority_id != Authority(key="Bob").authority_id

    def test_mailto_becomes_email(self):
        authority = Authority(key="a")
        authority.set_uri("mailto:alice&example.com")
        assert authority.email == "alice@example.com"
        assert authority.uri == ""

    def test_other_uri_kept(self):
        authority = Authority(key="a")
        authority.set_uri("https://example.org/alice")
        assert authority.uri == "https://example.org/alice"


class TestAuthorityRegistry:
    def test_dedup_by_key(self, authorities):
        first = authorities.get_or_create("Alice", authorities.populate_person("Alice Smith"))
        second = authorities.get_or_create("Alice", authorities.populate_person("Someone Else"))
        assert first is second
        assert first.name == "Alice Smith"
        assert len(authorities) == 1

    def test_first_encounter_order(self, authorities):
        for key in ("c", "a", "b", "a"):
            authorities.get_or_create(key)
        assert [a.key for a in authorities] == ["c", "a", "b"]

    def test_contains_and_get(self, authorities):
        authorities.get_or_create("x")
        assert "x" in authorities
        assert authorities.get("y") is None

    def test_person_named_as_organization(self, authorities):
        iana = authorities.get_or_create("IANA", authorities.populate_person("IANA", "mailto:iana&iana.org"))
        assert iana.o == "IANA"
        assert iana.cn == ""
        assert iana.email == "iana@iana.org"

    def test_person_gets_common_name(self, authorities):
        alice = authorities.get_or_create("Alice", authorities.populate_person("Alice Smith"))
        assert alice.cn == "Alice Smith"
        assert alice.o == ""

    def test_expert_with_organization(self, authorities):
        expert = authorities.get_or_create("e", authorities.populate_expert("Jane  Expert (Example Corp)"))
        assert expert.cn == "Jane Expert"
        assert expert.o == "IANA, Example Corp"

    def test_expert_without_organization(self, authorities):
        expert = authorities.get_or_create("e", authorities.populate_expert("Jane Expert"))
        assert expert.cn == "Jane Expert"
        assert expert.o == "IANA"

    def test_custom_organization_literal(self):
        registry = AuthorityRegistry(organization_literal="ACME")
        expert = registry.get_or_create("e", registry.populate_expert("Jane"))
        assert expert.o == "ACME"


class TestAttach:
    def test_dedicated_links_id(self, authorities):
        node = Node(1)
        alice = authorities.get_or_create("Alice", authorities.populate_person("Alice Smith", "mailto:a&x.org"))
        authorities.attach(node, alice, ContactPolicy.dedicated)
        authorities.attach(node, alice, ContactPolicy.dedicated)
        assert node.authority_ids == [alice.authority_id]
        assert node.contact.is_empty()
        assert alice.nodes == ["1"]

    def test_combined_copies_fields(self, authorities):
        node = Node(1)
        alice = authorities.get_or_create("Alice", authorities.populate_person("Alice Smith", "mailto:a&x.org"))
        authorities.attach(node, alice, ContactPolicy.combined)
        assert node.authority_ids == []
        assert node.contact.cn == "Alice Smith"
        assert node.contact.email == "a@x.org"
        assert node.description == "Alice Smith"

    def test_combined_keeps_existing_description(self, authorities):
        node = Node(1)
        node.description = "System group"
        alice = authorities.get_or_create("Alice", authorities.populate_person("Alice Smith"))
        authorities.attach(node, alice, ContactPolicy.combined)
        assert node.description == "System group"

    def test_to_list_omits_empty_fields(self, authorities):
        authorities.get_or_create("Alice", authorities.populate_person("Alice Smith"))
        [entry] = authorities.to_list()
        assert entry["cn"] == "Alice Smith"
        assert "email" not in entry
