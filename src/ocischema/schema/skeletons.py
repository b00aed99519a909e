import copy
from typing import Optional

from ocischema.schema.mediatype import (
    MEDIA_TYPE_DESCRIPTOR,
    MEDIA_TYPE_IMAGE_CONFIG,
    MEDIA_TYPE_IMAGE_INDEX,
    MEDIA_TYPE_IMAGE_LAYER,
    MEDIA_TYPE_MANIFEST,
    MEDIA_TYPE_MANIFEST_LIST,
    DocumentKind,
)

# sha256 of the empty string
EMPTY_DIGEST = "sha256:e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

EmptyPlatform = {
    "architecture": "amd64",
    "os": "linux",
}

EmptyDescriptor = {
    "mediaType": MEDIA_TYPE_DESCRIPTOR,
    "size": 0,
    "digest": EMPTY_DIGEST,
}

EmptyManifest = {
    "schemaVersion": 2,
    "mediaType": MEDIA_TYPE_MANIFEST,
    "config": {
        "mediaType": MEDIA_TYPE_IMAGE_CONFIG,
        "size": 0,
        "digest": EMPTY_DIGEST,
    },
    "layers": [
        {
            "mediaType": MEDIA_TYPE_IMAGE_LAYER,
            "size": 0,
            "digest": EMPTY_DIGEST,
        }
    ],
}

EmptyManifestList = {
    "schemaVersion": 2,
    "mediaType": MEDIA_TYPE_MANIFEST_LIST,
    "manifests": [],
}

EmptyIndex = {
    "schemaVersion": 2,
    "mediaType": MEDIA_TYPE_IMAGE_INDEX,
    "manifests": [],
    "annotations": {},
}

EmptyConfig = {
    "architecture": "amd64",
    "os": "linux",
    "rootfs": {"type": "layers", "diff_ids": []},
}


def NewPlatform(architecture: str, os: str = "linux", variant: Optional[str] = None) -> dict:
    platform = copy.deepcopy(EmptyPlatform)
    platform["architecture"] = architecture
    platform["os"] = os
    if variant:
        platform["variant"] = variant
    return platform


def NewDescriptor(
    media_type: str, digest: str, size: int, platform: Optional[dict] = None
) -> dict:
    descriptor = copy.deepcopy(EmptyDescriptor)
    descriptor["mediaType"] = media_type
    descriptor["digest"] = digest
    descriptor["size"] = size
    if platform is not None:
        descriptor["platform"] = platform
    return descriptor


def NewManifest(config: Optional[dict] = None, layers: Optional[list] = None) -> dict:
    manifest = copy.deepcopy(EmptyManifest)
    if config is not None:
        manifest["config"] = config
    if layers is not None:
        manifest["layers"] = layers
    return manifest


def NewManifestList(manifests: Optional[list] = None) -> dict:
    manifest_list = copy.deepcopy(EmptyManifestList)
    manifest_list["manifests"] = list(manifests or [])
    return manifest_list


def NewIndex(manifests: Optional[list] = None) -> dict:
    index = copy.deepcopy(EmptyIndex)
    index["manifests"] = list(manifests or [])
    return index


def NewConfig(architecture: str, os: str = "linux", diff_ids: Optional[list] = None) -> dict:
    config = copy.deepcopy(EmptyConfig)
    config["architecture"] = architecture
    config["os"] = os
    config["rootfs"]["diff_ids"] = list(diff_ids or [])
    return config


_SKELETONS = {
    DocumentKind.Descriptor: EmptyDescriptor,
    DocumentKind.Manifest: EmptyManifest,
    DocumentKind.ManifestList: EmptyManifestList,
    DocumentKind.Index: EmptyIndex,
    DocumentKind.Config: EmptyConfig,
}


def skeleton(kind: DocumentKind) -> dict:
    """A minimal document of ``kind`` that validates."""
    return copy.deepcopy(_SKELETONS[kind])
