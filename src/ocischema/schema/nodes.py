import re
from enum import Enum, auto
from typing import Any, Optional

from ocischema.errors import SchemaLoadError

JSON_TYPES = frozenset(
    ["string", "number", "integer", "boolean", "array", "object", "null"]
)

# draft-04 keywords with no compiled counterpart; a source using them is rejected
UNSUPPORTED_KEYWORDS = frozenset(
    [
        "additionalItems",
        "allOf",
        "anyOf",
        "dependencies",
        "maxItems",
        "maxLength",
        "maxProperties",
        "minLength",
        "minProperties",
        "multipleOf",
        "not",
        "oneOf",
        "uniqueItems",
    ]
)


class ObjectMode(Enum):
    # unknown properties are ignored
    Open = auto()
    # unknown properties are violations
    Closed = auto()


class SchemaNode:
    """
    One compiled schema object.

    Nodes are built by the registry and never change once the registry is
    frozen, so they can be shared between concurrent validations.
    A reference node carries the raw ``$ref`` token in ``ref`` and, after
    resolution, a direct link to the referenced node in ``target``.
    """

    def __init__(self, location: str):
        self.location = location
        self.types: Optional[frozenset] = None
        self.required: tuple = ()
        self.properties: dict = {}
        self.pattern_properties: list = []
        self.object_mode = ObjectMode.Open
        self.additional: Optional["SchemaNode"] = None
        self.items: Optional["SchemaNode"] = None
        self.min_items: Optional[int] = None
        self.enum: Optional[tuple] = None
        self.format: Optional[str] = None
        self.pattern: Optional[re.Pattern] = None
        self.minimum = None
        self.maximum = None
        self.exclusive_minimum = False
        self.exclusive_maximum = False
        self.ref: Optional[str] = None
        self.target: Optional["SchemaNode"] = None

    @property
    def kind(self) -> str:
        if self.ref is not None:
            return "reference"
        if self.enum is not None:
            return "enumeration"
        if self.pattern_properties or self.additional is not None:
            return "map"
        if self.properties or self.required or self.types == {"object"}:
            return "object"
        if self.items is not None or self.types == {"array"}:
            return "array"
        if self.format is not None:
            return "format"
        if self.types is not None:
            return "primitive"
        return "any"

    def children(self):
        yield from self.properties.values()
        for _, node in self.pattern_properties:
            yield node
        if self.additional is not None:
            yield self.additional
        if self.items is not None:
            yield self.items

    def __repr__(self):
        return f"<SchemaNode {self.kind} at {self.location}>"


def _fail(location: str, message: str):
    raise SchemaLoadError(f"{location}: {message}")


def _compile_types(location: str, value: Any) -> frozenset:
    names = [value] if isinstance(value, str) else value
    if not isinstance(names, list) or not names:
        _fail(location, f"'type' must be a string or a non-empty list, got {value!r}")
    unknown = [n for n in names if n not in JSON_TYPES]
    if unknown:
        _fail(location, f"unknown type(s) {unknown}")
    return frozenset(names)


def compile_node(schema: Any, location: str, refs: list) -> SchemaNode:
    """
    Compile a parsed schema object into a ``SchemaNode`` tree.

    Every reference node created is appended to ``refs`` so the registry can
    resolve them all once every source is compiled.
    """
    if not isinstance(schema, dict):
        _fail(location, f"schema must be an object, got {type(schema).__name__}")

    node = SchemaNode(location)

    if "$ref" in schema:
        ref = schema["$ref"]
        if not isinstance(ref, str):
            _fail(location, "'$ref' must be a string")
        # draft-04: keywords next to $ref are ignored
        node.ref = ref
        refs.append(node)
        return node

    unsupported = sorted(UNSUPPORTED_KEYWORDS.intersection(schema))
    if unsupported:
        _fail(location, f"unsupported keyword(s) {unsupported}")

    if "type" in schema:
        node.types = _compile_types(location, schema["type"])
    if "required" in schema:
        node.required = tuple(schema["required"])
    for name, sub in schema.get("properties", {}).items():
        node.properties[name] = compile_node(
            sub, f"{location}/properties/{name}", refs
        )
    for key_pattern, sub in schema.get("patternProperties", {}).items():
        try:
            compiled = re.compile(key_pattern)
        except re.error as e:
            _fail(location, f"invalid patternProperties key {key_pattern!r}: {e}")
        sub_location = f"{location}/patternProperties/{key_pattern}"
        node.pattern_properties.append((compiled, compile_node(sub, sub_location, refs)))

    additional = schema.get("additionalProperties", True)
    if additional is False:
        node.object_mode = ObjectMode.Closed
    elif isinstance(additional, dict):
        node.additional = compile_node(additional, f"{location}/additionalProperties", refs)

    if "items" in schema:
        if isinstance(schema["items"], list):
            _fail(location, "tuple-typed 'items' is not supported")
        node.items = compile_node(schema["items"], f"{location}/items", refs)
    if "minItems" in schema:
        node.min_items = schema["minItems"]
    if "enum" in schema:
        node.enum = tuple(schema["enum"])
    if "format" in schema:
        node.format = schema["format"]
    if "pattern" in schema:
        try:
            node.pattern = re.compile(schema["pattern"])
        except re.error as e:
            _fail(location, f"invalid pattern {schema['pattern']!r}: {e}")
    if "minimum" in schema:
        node.minimum = schema["minimum"]
        node.exclusive_minimum = bool(schema.get("exclusiveMinimum", False))
    if "maximum" in schema:
        node.maximum = schema["maximum"]
        node.exclusive_maximum = bool(schema.get("exclusiveMaximum", False))

    return node
