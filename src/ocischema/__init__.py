import importlib.metadata

try:
    __version__ = importlib.metadata.version(__package__ or __name__)
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0"

del importlib

from ocischema.digest import calculate_digest, verify_digest  # noqa: E402
from ocischema.errors import (  # noqa: E402
    DocumentValidationError,
    MalformedInputError,
    SchemaLoadError,
    Violation,
)
from ocischema.schema.mediatype import (  # noqa: E402
    DocumentKind,
    MediaTypeDescriptor,
    MediaTypeImageConfig,
    MediaTypeImageIndex,
    MediaTypeManifest,
    MediaTypeManifestList,
    Validator,
    validate,
)
from ocischema.schema.registry import DefinitionRegistry  # noqa: E402
