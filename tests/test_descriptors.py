# tests/test_descriptors.py
"""Tests for the descriptor model and the shorthand parser."""

from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from simpleschema import (
    Array,
    DefinitionError,
    ExternalRef,
    FieldSpec,
    Mapping,
    Primitive,
    SchemaProvider,
    compile_schema,
    parse_descriptor,
)
from simpleschema.descriptors import IntegerOptions, StringOptions

from providers import Money


class TestShorthand:

    def test_kind_string(self):
        descriptor = parse_descriptor("integer")
        assert isinstance(descriptor, Primitive)
        assert descriptor.kind == "integer"
        assert descriptor.options == IntegerOptions()

    def test_tuple_with_options(self):
        descriptor = parse_descriptor(("string", {"max_length": 3}))
        assert descriptor.options.max_length == 3

    def test_type_key_equals_tuple_form(self):
        assert parse_descriptor({"$type": "integer", "minimum": 1}) == parse_descriptor(
            ("integer", {"minimum": 1})
        )

    def test_outer_options_win(self):
        descriptor = parse_descriptor(("integer", {"minimum": 1}), {"minimum": 2})
        assert descriptor.options.minimum == 2

    def test_mapping_keeps_declaration_order(self):
        descriptor = parse_descriptor({"b": "string", "a": ("integer", {"optional": True})})
        assert isinstance(descriptor, Mapping)
        assert [f.name for f in descriptor.fields] == ["b", "a"]
        assert [f.optional for f in descriptor.fields] == [False, True]
        assert descriptor.required_keys == ["b"]

    def test_array(self):
        descriptor = parse_descriptor((["string"], {"min_items": 2}))
        assert isinstance(descriptor, Array)
        assert descriptor.element == Primitive(kind="string")
        assert descriptor.options.min_items == 2

    def test_provider_class(self):
        descriptor = parse_descriptor((Money, {"currencies": ["JPY"]}))
        assert isinstance(descriptor, ExternalRef)
        assert descriptor.options == {"currencies": ("JPY",)}
        assert descriptor.provider_name == "Money"

    def test_existing_descriptor_passes_through(self):
        descriptor = parse_descriptor({"a": "string"})
        assert parse_descriptor(descriptor) is descriptor

    def test_existing_descriptor_with_options(self):
        descriptor = parse_descriptor(parse_descriptor("string"), {"nullable": True})
        assert descriptor.nullable is True

    def test_field_key(self):
        descriptor = parse_descriptor({"first_name": ("string", {"key": "first-name"})})
        field = descriptor.fields[0]
        assert field.name == "first_name"
        assert field.wire_key == "first-name"

    @pytest.mark.parametrize("spec", [None, 3, True, 2.5, b"string"])
    def test_non_descriptions_rejected(self, spec):
        with pytest.raises(DefinitionError):
            parse_descriptor(spec)

    def test_optional_must_be_boolean(self):
        with pytest.raises(DefinitionError, match="optional"):
            parse_descriptor({"a": ("string", {"optional": "yes"})})

    def test_malformed_tuple(self):
        with pytest.raises(DefinitionError, match="pair"):
            parse_descriptor(("string", "nullable"))

    def test_field_names_must_be_strings(self):
        with pytest.raises(DefinitionError):
            parse_descriptor({1: "string"})

    def test_duplicate_wire_keys(self):
        with pytest.raises(DefinitionError, match="duplicate"):
            parse_descriptor({"a": "string", "b": ("string", {"key": "a"})})


class TestNodes:

    def test_direct_construction(self):
        descriptor = Primitive(kind="integer", options={"minimum": 1})
        assert descriptor.options == IntegerOptions(minimum=1)

    def test_options_must_match_kind(self):
        with pytest.raises(DefinitionError):
            Primitive(kind="integer", options=StringOptions())

    def test_unknown_kind(self):
        with pytest.raises(DefinitionError):
            Primitive(kind="float")

    def test_unknown_option_names_kind_and_key(self):
        with pytest.raises(DefinitionError, match="'format' is not valid for integer"):
            IntegerOptions(format="email")

    def test_nodes_are_immutable(self):
        descriptor = parse_descriptor({"a": "string"})
        with pytest.raises(ValidationError):
            descriptor.fields = ()

    def test_equal_descriptors_hash_equal(self):
        schema = {"a": ("string", {"enum": ["x", "y"]}), "b": [Money], "c": "any"}
        first, second = parse_descriptor(schema), parse_descriptor(schema)
        assert first == second
        assert hash(first) == hash(second)

    def test_with_options_merges(self):
        descriptor = Primitive(kind="string", options={"min_length": 1})
        merged = descriptor.with_options(max_length=5)
        assert merged.options.min_length == 1
        assert merged.options.max_length == 5
        assert descriptor.options.max_length is None

    def test_with_options_on_container_nodes(self):
        mapping = parse_descriptor({"a": "string"}).with_options(nullable=True)
        assert mapping.nullable and mapping.fields[0].name == "a"
        array = parse_descriptor(["integer"]).with_options(max_items=2)
        assert array.options.max_items == 2
        ref = parse_descriptor(Money).with_options(currencies=["JPY"])
        assert ref.options == {"currencies": ("JPY",)}

    def test_mapping_from_field_specs(self):
        descriptor = Mapping(
            fields=[FieldSpec(name="a", descriptor=Primitive(kind="null"), optional=True)],
            options={"nullable": True},
        )
        assert descriptor.nullable is True
        assert descriptor.required_keys == []

    def test_external_ref_options_are_copied(self):
        options = {"currencies": ["EUR"]}
        descriptor = ExternalRef(provider=Money, options=options)
        options["currencies"].append("USD")
        assert descriptor.options == {"currencies": ("EUR",)}

    def test_external_ref_options_are_read_only(self):
        descriptor = parse_descriptor((Money, {"currencies": ["EUR"]}))
        before = compile_schema(descriptor)
        with pytest.raises(TypeError):
            descriptor.options["currencies"] = ["JPY"]
        with pytest.raises(AttributeError):
            descriptor.options["currencies"].append("JPY")
        assert compile_schema(descriptor) == before

    def test_provider_cannot_corrupt_options(self):
        class Greedy(SchemaProvider):
            def resolve(self, options):
                options["tags"].append("extra")
                return ("string", {"enum": options["tags"]})

            def convert_value(self, resolved, value):
                return value

        descriptor = ExternalRef(provider=Greedy, options={"tags": ["a"]})
        first = compile_schema(descriptor)
        assert compile_schema(descriptor) == first
        assert first["enum"] == ["a", "extra"]
        assert descriptor.options == {"tags": ("a",)}

    def test_equal_providers_are_not_interchangeable(self):
        first = ExternalRef(provider=_namespace_provider())
        second = ExternalRef(provider=_namespace_provider())
        assert first.provider == second.provider
        assert first != second
        assert first == ExternalRef(provider=first.provider)
        assert hash(first) == hash(ExternalRef(provider=first.provider))


def _resolve_integer(options):
    return "integer"


def _identity(resolved, value):
    return value


def _namespace_provider():
    return SimpleNamespace(resolve=_resolve_integer, convert_value=_identity)
