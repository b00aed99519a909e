import logging
from typing import Any, Iterator

from ocischema.errors import Violation
from ocischema.schema.formats import FormatMode, checker_for
from ocischema.schema.nodes import ObjectMode, SchemaNode

logger = logging.getLogger(__name__)


def json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def type_matches(value: Any, types: frozenset) -> bool:
    actual = json_type(value)
    if actual in types:
        return True
    if actual == "integer" and "number" in types:
        return True
    if actual == "number" and "integer" in types:
        return value.is_integer()
    return False


def json_equal(a: Any, b: Any) -> bool:
    """Equality by JSON semantics: booleans never equal numbers."""
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, list) and isinstance(b, list):
        return len(a) == len(b) and all(json_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, dict) and isinstance(b, dict):
        return a.keys() == b.keys() and all(json_equal(a[k], b[k]) for k in a)
    return a == b


def _describe_types(types: frozenset) -> str:
    names = sorted(types)
    return names[0] if len(names) == 1 else " or ".join(names)


class StructuralValidator:
    """
    Walks a JSON value against a compiled schema graph and collects every
    violation instead of stopping at the first one.

    The validator holds no per-document state; one instance may be shared
    by any number of threads.
    """

    def __init__(self, format_mode: FormatMode = FormatMode.Strict):
        self.format_mode = format_mode

    def validate(self, node: SchemaNode, value: Any) -> list:
        return list(self.iter_violations(node, value))

    def iter_violations(self, node: SchemaNode, value: Any) -> Iterator[Violation]:
        yield from self._walk(node, value, (), set())

    def _walk(self, node, value, path, visited) -> Iterator[Violation]:
        if node.ref is not None:
            # (schema node, document path) pairs seen in this call
            key = (id(node.target), path)
            if key in visited:
                return
            visited.add(key)
            yield from self._walk(node.target, value, path, visited)
            return

        if node.types is not None and not type_matches(value, node.types):
            yield Violation(
                path,
                f"expected type {_describe_types(node.types)}, got {json_type(value)}",
                "type",
            )
            return

        if node.enum is not None and not any(json_equal(value, e) for e in node.enum):
            allowed = ", ".join(repr(e) for e in node.enum)
            yield Violation(path, f"{value!r} is not one of [{allowed}]", "enum")

        if isinstance(value, dict):
            yield from self._walk_object(node, value, path, visited)
        elif isinstance(value, list):
            yield from self._walk_array(node, value, path, visited)
        elif isinstance(value, str):
            yield from self._check_string(node, value, path)
        elif json_type(value) in ("integer", "number"):
            yield from self._check_number(node, value, path)

    def _walk_object(self, node, value, path, visited):
        for name in node.required:
            if name not in value:
                yield Violation(
                    path + (name,), f"required property '{name}' is missing", "required"
                )

        for name, item in value.items():
            matched = False
            if name in node.properties:
                matched = True
                yield from self._walk(node.properties[name], item, path + (name,), visited)
            for key_pattern, sub in node.pattern_properties:
                if key_pattern.search(name):
                    matched = True
                    yield from self._walk(sub, item, path + (name,), visited)
            if matched:
                continue
            if node.additional is not None:
                yield from self._walk(node.additional, item, path + (name,), visited)
            elif node.object_mode is ObjectMode.Closed:
                yield Violation(
                    path + (name,), f"property '{name}' is not allowed", "additionalProperties"
                )

    def _walk_array(self, node, value, path, visited):
        if node.min_items is not None and len(value) < node.min_items:
            yield Violation(
                path,
                f"expected at least {node.min_items} item(s), got {len(value)}",
                "minItems",
            )
        if node.items is None:
            return
        for index, item in enumerate(value):
            yield from self._walk(node.items, item, path + (index,), visited)

    def _check_string(self, node, value, path):
        if node.pattern is not None and not node.pattern.search(value):
            yield Violation(
                path, f"{value!r} does not match pattern {node.pattern.pattern!r}", "pattern"
            )
        if node.format is None:
            return
        check = checker_for(node.format)
        if check is None:
            return
        problem = check(value)
        if problem is None:
            return
        if self.format_mode is FormatMode.Advisory:
            logger.warning(f"{node.format} format ignored at {path}: {value!r} {problem}")
            return
        yield Violation(path, f"{value!r} {problem}", "format")

    def _check_number(self, node, value, path):
        if node.minimum is not None:
            if value < node.minimum or (node.exclusive_minimum and value == node.minimum):
                bound = "greater than" if node.exclusive_minimum else "at least"
                yield Violation(path, f"{value} must be {bound} {node.minimum}", "minimum")
        if node.maximum is not None:
            if value > node.maximum or (node.exclusive_maximum and value == node.maximum):
                bound = "less than" if node.exclusive_maximum else "at most"
                yield Violation(path, f"{value} must be {bound} {node.maximum}", "maximum")
