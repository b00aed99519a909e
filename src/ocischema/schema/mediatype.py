import json
import logging
from enum import Enum
from typing import Any, Optional

from ocischema.errors import DocumentValidationError, MalformedInputError, SchemaLoadError
from ocischema.schema.formats import FormatMode
from ocischema.schema.registry import DefinitionRegistry
from ocischema.schema.validator import StructuralValidator

logger = logging.getLogger(__name__)

MEDIA_TYPE_DESCRIPTOR = "application/vnd.oci.descriptor.v1+json"
MEDIA_TYPE_MANIFEST = "application/vnd.oci.image.manifest.v1+json"
MEDIA_TYPE_MANIFEST_LIST = "application/vnd.oci.image.manifest.list.v1+json"
MEDIA_TYPE_IMAGE_INDEX = "application/vnd.oci.image.index.v1+json"
MEDIA_TYPE_IMAGE_CONFIG = "application/vnd.oci.image.serialization.config.v1+json"
MEDIA_TYPE_IMAGE_LAYER = "application/vnd.oci.image.rootfs.tar.gzip"

DOCKER_MEDIA_TYPE_MANIFEST_LIST = "application/vnd.docker.distribution.manifest.list.v2+json"
DOCKER_MEDIA_TYPE_MANIFEST = "application/vnd.docker.distribution.manifest.v2+json"
DOCKER_MEDIA_TYPE_IMAGE_LAYER = "application/vnd.docker.image.rootfs.diff.tar.gzip"
DOCKER_MEDIA_TYPE_IMAGE_CONFIG = "application/vnd.docker.container.image.v1+json"


class DocumentKind(Enum):
    Descriptor = MEDIA_TYPE_DESCRIPTOR
    Manifest = MEDIA_TYPE_MANIFEST
    ManifestList = MEDIA_TYPE_MANIFEST_LIST
    Index = MEDIA_TYPE_IMAGE_INDEX
    Config = MEDIA_TYPE_IMAGE_CONFIG

    @property
    def cli_name(self) -> str:
        return _CLI_NAMES[self]

    @classmethod
    def from_name(cls, name: str) -> "DocumentKind":
        for kind, cli_name in _CLI_NAMES.items():
            if cli_name == name:
                return kind
        raise ValueError(f"unknown document kind {name!r}")


_CLI_NAMES = {
    DocumentKind.Descriptor: "descriptor",
    DocumentKind.Manifest: "manifest",
    DocumentKind.ManifestList: "manifest-list",
    DocumentKind.Index: "index",
    DocumentKind.Config: "config",
}

SCHEMA_BINDINGS = {
    DocumentKind.Descriptor: "content-descriptor.json",
    DocumentKind.Manifest: "image-manifest-schema.json",
    DocumentKind.ManifestList: "manifest-list-schema.json",
    DocumentKind.Index: "image-index-schema.json",
    DocumentKind.Config: "config-schema.json",
}


def _reject_constant(name):
    raise ValueError(f"{name} is not valid JSON")


def parse_document(source: Any) -> Any:
    """
    Parse a JSON document from bytes, text or anything with a ``read`` method.
    """
    if hasattr(source, "read"):
        source = source.read()
    if isinstance(source, (bytes, bytearray)):
        try:
            source = bytes(source).decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedInputError(f"document is not valid UTF-8: {e}") from e
    if not isinstance(source, str):
        raise TypeError(f"cannot read a document from {type(source).__name__}")
    try:
        return json.loads(source, parse_constant=_reject_constant)
    except ValueError as e:
        raise MalformedInputError(f"malformed JSON document: {e}") from e


class Validator:
    """
    Validates documents of one kind.

    The root schema node is looked up once, when the validator is created;
    a registry lacking the bound source is a load error.
    """

    def __init__(
        self,
        kind: DocumentKind,
        registry: Optional[DefinitionRegistry] = None,
        format_mode: FormatMode = FormatMode.Strict,
    ):
        if not isinstance(kind, DocumentKind):
            raise TypeError(f"expected a DocumentKind, got {kind!r}")
        self.kind = kind
        self.registry = registry if registry is not None else DefinitionRegistry.default()
        self.schema = self.registry.root(SCHEMA_BINDINGS[kind])
        self._structural = StructuralValidator(format_mode)

    def violations(self, source: Any) -> list:
        """All violations of the document, empty when it is valid."""
        document = parse_document(source)
        found = self._structural.validate(self.schema, document)
        logger.debug(f"validated {self.kind.cli_name}: {len(found)} violation(s)")
        return found

    def validate(self, source: Any) -> None:
        found = self.violations(source)
        if found:
            raise DocumentValidationError(found, self.kind)

    def __repr__(self):
        return f"<Validator {self.kind.value}>"


def check_bindings(registry: DefinitionRegistry) -> None:
    """Every document kind must be bound to a source present in ``registry``."""
    missing = [
        f"{kind.cli_name} -> {source}"
        for kind, source in SCHEMA_BINDINGS.items()
        if source not in registry.sources
    ]
    if missing:
        raise SchemaLoadError("unbound document kind(s): " + ", ".join(missing))


def validate(
    kind: DocumentKind, source: Any, registry: Optional[DefinitionRegistry] = None
) -> None:
    Validator(kind, registry).validate(source)


MediaTypeDescriptor = Validator(DocumentKind.Descriptor)
MediaTypeManifest = Validator(DocumentKind.Manifest)
MediaTypeManifestList = Validator(DocumentKind.ManifestList)
MediaTypeImageIndex = Validator(DocumentKind.Index)
MediaTypeImageConfig = Validator(DocumentKind.Config)
