"""Tests for TypeRegistry and schema derivation."""

import pytest
from mockcms.errors import ConflictError, UnknownTypeError
from mockcms.schema.models import PropertyKind, PropertySchema, TypeDescriptor
from mockcms.schema.registry import TypeRegistry, derive_schema


def _attrs(descriptor: TypeDescriptor) -> dict[str, PropertySchema]:
    return descriptor.properties["attributes"].properties


class TestDeriveSchema:
    def test_adds_standard_properties(self):
        derived = derive_schema(TypeDescriptor(name="article"))
        assert {"editedBy", "active", "created", "updated"} <= set(_attrs(derived))
        assert _attrs(derived)["active"].type == PropertyKind.BOOLEAN

    def test_published_state_enum(self):
        derived = derive_schema(TypeDescriptor(name="article", has_published_state=True))
        assert _attrs(derived)["publishedState"].enum == ["DRAFT", "PUBLISHED", "UNPUBLISHED"]

    def test_no_published_state_without_flag(self):
        derived = derive_schema(TypeDescriptor(name="article"))
        assert "publishedState" not in _attrs(derived)

    def test_channel_specific_forces_publishing_group(self):
        derived = derive_schema(TypeDescriptor(name="teaser", channel_specific=True))
        assert derived.publishing_group_specific is True
        assert _attrs(derived)["channel"].reference == "channel"
        assert _attrs(derived)["publishingGroup"].reference == "publishing-group"

    def test_hierarchical_parent_is_self_reference(self):
        derived = derive_schema(TypeDescriptor(name="section", hierarchical=True))
        parent = _attrs(derived)["parent"]
        assert parent.type == PropertyKind.REFERENCE
        assert parent.reference == "section"

    def test_caller_properties_win(self):
        custom = PropertySchema(type=PropertyKind.STRING, title="Mine")
        descriptor = TypeDescriptor(
            name="article",
            properties={
                "attributes": PropertySchema(
                    type=PropertyKind.OBJECT, properties={"active": custom}
                ),
                "headline": PropertySchema(),
            },
        )
        derived = derive_schema(descriptor)
        assert _attrs(derived)["active"].title == "Mine"
        assert "headline" in derived.properties

    def test_does_not_mutate_input(self):
        descriptor = TypeDescriptor(name="article", channel_specific=True)
        derive_schema(descriptor)
        assert descriptor.properties == {}
        assert descriptor.publishing_group_specific is False

    def test_accepts_camel_case_input(self):
        descriptor = TypeDescriptor.model_validate(
            {"name": "teaser", "channelSpecific": True, "pluralTitle": "Teasers"}
        )
        assert descriptor.channel_specific is True
        assert descriptor.summary()["pluralTitle"] == "Teasers"


class TestTypeRegistry:
    def test_register_and_list_in_order(self):
        registry = TypeRegistry()
        registry.register(TypeDescriptor(name="b"))
        registry.register(TypeDescriptor(name="a"))
        assert [t.name for t in registry.list()] == ["b", "a"]

    def test_duplicate_registration_conflicts(self):
        registry = TypeRegistry()
        registry.register(TypeDescriptor(name="article"))
        with pytest.raises(ConflictError):
            registry.register(TypeDescriptor(name="article"))

    def test_redefinition_when_allowed(self):
        registry = TypeRegistry()
        registry.register(TypeDescriptor(name="article"))
        registry.register(TypeDescriptor(name="article", versioned=True), allow_redefine=True)
        assert registry.get("article").versioned is True
        assert len(registry.list()) == 1

    def test_get_unknown_raises(self):
        with pytest.raises(UnknownTypeError):
            TypeRegistry().get("nope")

    def test_ensure_registers_bare_type_once(self):
        registry = TypeRegistry()
        first = registry.ensure("channel")
        second = registry.ensure("channel")
        assert first.name == second.name == "channel"
        assert registry.names() == ["channel"]

    def test_clear(self):
        registry = TypeRegistry()
        registry.register(TypeDescriptor(name="article"))
        registry.clear()
        assert registry.list() == []
        assert "article" not in registry
