"""
Docker image manifest v2.2 compatibility.

Docker v2.2 documents have the same shape as their OCI counterparts and
differ only in media type strings. ``COMPAT_TABLE`` pairs each legacy
token with its modern equivalent; converting a document is a plain
substitution of every token in the serialized text.
"""

from ocischema.schema.mediatype import (
    DOCKER_MEDIA_TYPE_IMAGE_CONFIG,
    DOCKER_MEDIA_TYPE_IMAGE_LAYER,
    DOCKER_MEDIA_TYPE_MANIFEST,
    DOCKER_MEDIA_TYPE_MANIFEST_LIST,
    MEDIA_TYPE_IMAGE_CONFIG,
    MEDIA_TYPE_IMAGE_LAYER,
    MEDIA_TYPE_MANIFEST,
    MEDIA_TYPE_MANIFEST_LIST,
)

COMPAT_TABLE = {
    DOCKER_MEDIA_TYPE_MANIFEST_LIST: MEDIA_TYPE_MANIFEST_LIST,
    DOCKER_MEDIA_TYPE_MANIFEST: MEDIA_TYPE_MANIFEST,
    DOCKER_MEDIA_TYPE_IMAGE_LAYER: MEDIA_TYPE_IMAGE_LAYER,
    DOCKER_MEDIA_TYPE_IMAGE_CONFIG: MEDIA_TYPE_IMAGE_CONFIG,
}


def check_table(table: dict) -> None:
    """Substitution is only order independent if no token contains another."""
    tokens = list(table) + list(table.values())
    if len(set(tokens)) != len(tokens):
        raise ValueError("compatibility table tokens must be unique")
    for i, token in enumerate(tokens):
        for j, other in enumerate(tokens):
            if i != j and token in other:
                raise ValueError(
                    f"compatibility token {token!r} overlaps with {other!r}"
                )


def _substitute(raw: str, pairs) -> str:
    out = raw
    for old, new in sorted(pairs):
        out = out.replace(old, new)
    return out


def to_legacy(raw: str, table: dict = COMPAT_TABLE) -> str:
    """Rewrite every modern token in ``raw`` to its legacy equivalent."""
    return _substitute(raw, ((modern, legacy) for legacy, modern in table.items()))


def to_modern(raw: str, table: dict = COMPAT_TABLE) -> str:
    """Rewrite every legacy token in ``raw`` to its modern equivalent."""
    return _substitute(raw, table.items())


check_table(COMPAT_TABLE)
