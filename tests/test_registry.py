import json

import pytest

from ocischema.errors import SchemaLoadError
from ocischema.schema.mediatype import SCHEMA_BINDINGS, check_bindings
from ocischema.schema.registry import DefinitionRegistry, reference_key
from ocischema.schema.validator import StructuralValidator

from helper import load_fixture


def test_default_registry_has_every_source(registry):
    assert sorted(registry.sources) == sorted(
        [
            "config-schema.json",
            "content-descriptor.json",
            "defs.json",
            "image-index-schema.json",
            "image-manifest-schema.json",
            "manifest-list-schema.json",
        ]
    )
    for source in SCHEMA_BINDINGS.values():
        assert source in registry
    check_bindings(registry)


def test_definitions_are_keyed_by_source_and_name(registry):
    assert "defs.json#/definitions/digest" in registry
    assert "manifest-list-schema.json#/definitions/platform" in registry
    assert len(registry.definitions("defs.json")) == 10
    assert all(key.startswith("defs.json#/definitions/") for key in registry.definitions("defs.json"))


def test_cross_source_reference_is_a_direct_link(registry):
    entry = registry["image-index-schema.json#/definitions/indexEntry"]
    platform = entry.properties["platform"]
    assert platform.kind == "reference"
    assert platform.target is registry["manifest-list-schema.json#/definitions/platform"]


def test_whole_source_reference_links_to_source_root(registry):
    config = registry.root("image-manifest-schema.json").properties["config"]
    assert config.target is registry["content-descriptor.json"]


def test_source_order_does_not_change_the_graph(packaged_sources):
    forward = DefinitionRegistry.build(list(packaged_sources.items()))
    backward = DefinitionRegistry.build(list(reversed(list(packaged_sources.items()))))
    assert sorted(forward) == sorted(backward)

    manifest = load_fixture("oci-manifest.json")
    manifest["schemaVersion"] = 3
    validator = StructuralValidator()
    first = validator.validate(forward.root("image-manifest-schema.json"), manifest)
    second = validator.validate(backward.root("image-manifest-schema.json"), manifest)
    assert first == second
    assert len(first) == 1


def test_dangling_references_are_all_reported():
    sources = {
        "a.json": json.dumps(
            {
                "type": "object",
                "properties": {
                    "x": {"$ref": "b.json#/definitions/missing"},
                    "y": {"$ref": "#/definitions/nope"},
                },
            }
        ),
        "b.json": json.dumps({"definitions": {"present": {"type": "string"}}}),
    }
    with pytest.raises(SchemaLoadError, match="2 dangling") as excinfo:
        DefinitionRegistry.build(sources)
    assert "b.json#/definitions/missing" in str(excinfo.value)
    assert "#/definitions/nope" in str(excinfo.value)


def test_unsupported_reference_form_is_dangling():
    sources = {"a.json": '{"properties": {"x": {"$ref": "#/properties/y"}}}'}
    with pytest.raises(SchemaLoadError, match="unresolved reference"):
        DefinitionRegistry.build(sources)


@pytest.mark.parametrize(
    "ref, expected",
    [
        ("#/definitions/x", "a.json#/definitions/x"),
        ("b.json#/definitions/x", "b.json#/definitions/x"),
        ("b.json", "b.json"),
        ("b.json#", "b.json"),
        ("#/definitions/a~1b", "a.json#/definitions/a/b"),
        ("#/properties/x", None),
        ("#/definitions/x/properties/y", None),
    ],
)
def test_reference_key(ref, expected):
    assert reference_key(ref, "a.json") == expected


def test_duplicate_definition_name_is_fatal():
    raw = '{"definitions": {"x": {"type": "string"}, "x": {"type": "integer"}}}'
    with pytest.raises(SchemaLoadError, match="duplicate key"):
        DefinitionRegistry.build({"a.json": raw})


def test_duplicate_source_name_is_fatal():
    with pytest.raises(SchemaLoadError, match="duplicate schema source"):
        DefinitionRegistry.build([("a.json", "{}"), ("a.json", "{}")])


def test_malformed_source_is_fatal():
    with pytest.raises(SchemaLoadError, match="cannot parse"):
        DefinitionRegistry.build({"a.json": '{"type": '})


def test_source_failing_the_metaschema_is_fatal():
    with pytest.raises(SchemaLoadError, match="not a valid draft-04 schema"):
        DefinitionRegistry.build({"a.json": '{"type": 5}'})


@pytest.mark.parametrize(
    "schema, keyword",
    [
        ({"type": "string", "maxLength": 3}, "maxLength"),
        ({"oneOf": [{"type": "string"}]}, "oneOf"),
        ({"type": "array", "uniqueItems": True}, "uniqueItems"),
        ({"properties": {"x": {"not": {"type": "null"}}}}, "not"),
        ({"definitions": {"x": {"minProperties": 1}}}, "minProperties"),
    ],
)
def test_unsupported_keyword_is_fatal(schema, keyword):
    with pytest.raises(SchemaLoadError, match=f"unsupported keyword.*{keyword}"):
        DefinitionRegistry.build({"a.json": json.dumps(schema)})


def test_property_named_like_a_keyword_is_allowed():
    raw = json.dumps({"properties": {"not": {"type": "string"}}, "required": ["oneOf"]})
    root = DefinitionRegistry.build({"a.json": raw}).root("a.json")
    assert sorted(root.properties) == ["not"]


def test_yaml_sources():
    sources = {
        "person.yaml": (
            "type: object\n"
            "required: [name]\n"
            "properties:\n"
            "  name:\n"
            "    $ref: 'defs.yml#/definitions/name'\n"
        ),
        "defs.yml": "definitions:\n  name:\n    type: string\n",
    }
    registry = DefinitionRegistry.build(sources)
    violations = StructuralValidator().validate(registry.root("person.yaml"), {"name": 5})
    assert [v.path for v in violations] == [("name",)]


def test_yaml_duplicate_keys_are_fatal():
    with pytest.raises(SchemaLoadError, match="duplicate key"):
        DefinitionRegistry.build({"a.yaml": "type: object\ntype: array\n"})


def test_reference_cycles_load():
    raw = json.dumps(
        {
            "$ref": "#/definitions/x",
            "definitions": {"x": {"$ref": "#/definitions/y"}, "y": {"$ref": "#/definitions/x"}},
        }
    )
    registry = DefinitionRegistry.build({"a.json": raw})
    x = registry["a.json#/definitions/x"]
    assert x.target.target is x


def test_load_directory(schema_dir):
    (schema_dir / "extra.yaml").write_text("definitions:\n  name:\n    type: string\n")
    (schema_dir / "README.txt").write_text("not a schema")
    registry = DefinitionRegistry.load(schema_dir)
    assert "extra.yaml#/definitions/name" in registry
    assert "README.txt" not in registry.sources


def test_load_missing_directory(tmp_path):
    with pytest.raises(SchemaLoadError, match="not a directory"):
        DefinitionRegistry.load(tmp_path / "missing")


def test_load_empty_directory(tmp_path):
    with pytest.raises(SchemaLoadError, match="no schema sources"):
        DefinitionRegistry.load(tmp_path)


def test_unbound_document_kind(packaged_sources):
    registry = DefinitionRegistry.build({"defs.json": packaged_sources["defs.json"]})
    with pytest.raises(SchemaLoadError, match="unbound document kind"):
        check_bindings(registry)


def test_registry_is_read_only(registry):
    with pytest.raises(TypeError):
        registry["x"] = None
    with pytest.raises(TypeError):
        registry._nodes["x"] = None
