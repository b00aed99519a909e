from typing import Optional, Tuple, Union

PathElement = Union[str, int]


class Violation:
    """A single schema constraint a document failed, located by its path."""

    __slots__ = ("path", "message", "keyword")

    def __init__(self, path: Tuple[PathElement, ...], message: str, keyword: str):
        self.path = tuple(path)
        self.message = message
        self.keyword = keyword

    @property
    def pointer(self) -> str:
        """RFC 6901 JSON pointer of the offending value."""
        return "".join(
            "/" + str(p).replace("~", "~0").replace("/", "~1") for p in self.path
        )

    @property
    def dotted_path(self) -> str:
        if not self.path:
            return "(root)"
        return ".".join(str(p) for p in self.path)

    def __eq__(self, other):
        if not isinstance(other, Violation):
            return NotImplemented
        return (self.path, self.message, self.keyword) == (
            other.path,
            other.message,
            other.keyword,
        )

    def __hash__(self):
        return hash((self.path, self.message, self.keyword))

    def __repr__(self):
        return f"Violation({self.path!r}, {self.message!r}, {self.keyword!r})"

    def __str__(self):
        return f"{self.dotted_path}: {self.message}"


class SchemaLoadError(ValueError):
    """The schema sources are broken. Raised while building a registry only."""


class MalformedInputError(ValueError):
    """The document is not well-formed JSON."""


class DocumentValidationError(ValueError):
    def __init__(self, violations: list, kind: Optional[object] = None):
        self.violations = list(violations)
        self.kind = kind
        lines = [str(v) for v in self.violations]
        target = f" as {kind.value}" if kind is not None else ""
        super().__init__(
            f"document failed validation{target} with "
            f"{len(self.violations)} violation(s):\n" + "\n".join(lines)
        )
