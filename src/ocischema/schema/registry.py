import functools
import json
import logging
import os
import pathlib
from collections.abc import Mapping
from types import MappingProxyType
from typing import Iterable, Optional, Tuple, Union

import jsonschema
import yaml

from ocischema.errors import SchemaLoadError
from ocischema.schema.nodes import SchemaNode, compile_node

logger = logging.getLogger(__name__)

SOURCES_DIR = pathlib.Path(__file__).parent / "sources"
SOURCE_SUFFIXES = (".json", ".yaml", ".yml")
DEFINITIONS_PREFIX = "/definitions/"


class _UniqueKeyLoader(yaml.SafeLoader):
    def construct_mapping(self, node, deep=False):
        seen = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            if key in seen:
                raise yaml.constructor.ConstructorError(
                    None, None, f"duplicate key {key!r}", key_node.start_mark
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


def _reject_duplicate_keys(pairs):
    result = {}
    for key, value in pairs:
        if key in result:
            raise ValueError(f"duplicate key {key!r}")
        result[key] = value
    return result


def parse_source(name: str, text: Union[str, bytes]) -> dict:
    """Parse one raw schema source, JSON unless the name has a YAML suffix."""
    try:
        if name.endswith((".yaml", ".yml")):
            document = yaml.load(text, Loader=_UniqueKeyLoader)
        else:
            document = json.loads(text, object_pairs_hook=_reject_duplicate_keys)
    except (ValueError, yaml.YAMLError) as e:
        raise SchemaLoadError(f"{name}: cannot parse schema source: {e}") from e

    try:
        jsonschema.Draft4Validator.check_schema(document)
    except jsonschema.exceptions.SchemaError as e:
        raise SchemaLoadError(f"{name}: not a valid draft-04 schema: {e.message}") from e
    return document


def _unescape(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def reference_key(ref: str, source: str) -> Optional[str]:
    """
    Map a ``$ref`` token found in ``source`` to a registry key.

    Returns ``None`` for reference forms the registry does not index.
    """
    target_source, _, fragment = ref.partition("#")
    target_source = target_source or source
    if fragment in ("", "/"):
        return target_source
    if fragment.startswith(DEFINITIONS_PREFIX):
        name = fragment[len(DEFINITIONS_PREFIX):]
        if name and "/" not in name:
            return f"{target_source}#{DEFINITIONS_PREFIX}{_unescape(name)}"
    return None


def _source_of(location: str) -> str:
    return location.partition("#")[0]


class DefinitionRegistry(Mapping):
    """
    Composed schema graph: every source root and every named definition,
    keyed ``<source>`` and ``<source>#/definitions/<name>``.

    Build it with :meth:`build`, :meth:`load` or :meth:`default`. The
    registry is read-only once built; all references are already resolved
    to direct links between nodes.
    """

    def __init__(self, nodes: dict, documents: dict):
        self._nodes = MappingProxyType(nodes)
        self._documents = MappingProxyType(documents)

    @classmethod
    def build(
        cls, sources: Union[Mapping, Iterable[Tuple[str, Union[str, bytes]]]]
    ) -> "DefinitionRegistry":
        pairs = sources.items() if isinstance(sources, Mapping) else sources

        documents = {}
        for name, text in pairs:
            if name in documents:
                raise SchemaLoadError(f"duplicate schema source {name!r}")
            logger.debug(f"parsing schema source {name}")
            documents[name] = parse_source(name, text)

        nodes = {}
        refs = []
        for name, document in documents.items():
            nodes[name] = compile_node(document, f"{name}#", refs)
            for definition, schema in document.get("definitions", {}).items():
                key = f"{name}#{DEFINITIONS_PREFIX}{definition}"
                nodes[key] = compile_node(schema, key, refs)

        dangling = []
        for node in refs:
            key = reference_key(node.ref, _source_of(node.location))
            if key is None or key not in nodes:
                dangling.append(f"{node.location}: unresolved reference {node.ref!r}")
                continue
            node.target = nodes[key]
        if dangling:
            raise SchemaLoadError(
                f"{len(dangling)} dangling reference(s):\n" + "\n".join(dangling)
            )

        logger.debug(
            f"schema registry built from {len(documents)} source(s), "
            f"{len(nodes)} node(s), {len(refs)} reference(s) resolved"
        )
        return cls(nodes, documents)

    @classmethod
    def load(cls, directory: Union[str, os.PathLike]) -> "DefinitionRegistry":
        """Build a registry from every schema source file in ``directory``."""
        directory = pathlib.Path(directory)
        if not directory.is_dir():
            raise SchemaLoadError(f"{directory} is not a directory")
        sources = []
        for path in sorted(directory.iterdir()):
            if path.is_file() and path.suffix in SOURCE_SUFFIXES:
                sources.append((path.name, path.read_text(encoding="utf-8")))
        if not sources:
            raise SchemaLoadError(f"no schema sources found in {directory}")
        logger.debug(f"loading {len(sources)} schema source(s) from {directory}")
        return cls.build(sources)

    @classmethod
    def default(cls) -> "DefinitionRegistry":
        """The registry of the schema sources shipped with this package."""
        return _default_registry()

    def __getitem__(self, key: str) -> SchemaNode:
        return self._nodes[key]

    def __iter__(self):
        return iter(self._nodes)

    def __len__(self):
        return len(self._nodes)

    @property
    def sources(self) -> list:
        return list(self._documents)

    def root(self, source: str) -> SchemaNode:
        if source not in self._documents:
            raise SchemaLoadError(f"no schema source named {source!r}")
        return self._nodes[source]

    def source_document(self, source: str) -> dict:
        """The parsed, uncompiled schema source."""
        if source not in self._documents:
            raise SchemaLoadError(f"no schema source named {source!r}")
        return self._documents[source]

    def definitions(self, source: Optional[str] = None) -> list:
        return [
            key
            for key in self._nodes
            if "#" in key and (source is None or _source_of(key) == source)
        ]


@functools.lru_cache(maxsize=None)
def _default_registry() -> DefinitionRegistry:
    return DefinitionRegistry.load(SOURCES_DIR)
