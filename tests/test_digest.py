import random
import string

import pytest

from ocischema.digest import calculate_digest, calculate_file_digest, verify_digest
from ocischema.schema.formats import check_digest

from helper import DOCKER_MANIFEST_DIGEST, fixture_path


def generate_random_string(length: int):
    characters = string.ascii_letters + string.digits + string.punctuation
    return "".join(random.choice(characters) for _ in range(length))


def test_digest_round_trip():
    data = generate_random_string(100).encode("utf-8")
    checksum = calculate_digest(data)
    assert check_digest(checksum) is None
    verify_digest(checksum, data)
    assert calculate_digest(data) == checksum


def test_sha512():
    checksum = calculate_digest(b"", "sha512")
    assert checksum.startswith("sha512:")
    assert check_digest(checksum) is None


def test_file_digest_matches_bytes_digest():
    assert calculate_file_digest(fixture_path("docker-manifest.json")) == DOCKER_MANIFEST_DIGEST


def test_verify_rejects_other_content():
    checksum = calculate_digest(b"original")
    with pytest.raises(ValueError, match="Invalid checksum"):
        verify_digest(checksum, b"tampered")


def test_unsupported_algorithm():
    with pytest.raises(ValueError, match="Unsupported"):
        calculate_digest(b"data", "md5")
    with pytest.raises(ValueError, match="Unsupported"):
        verify_digest("md5:d41d8cd98f00b204e9800998ecf8427e", b"")


def test_verify_needs_an_algorithm():
    with pytest.raises(ValueError, match="Invalid digest"):
        verify_digest("d41d8cd98f00b204e9800998ecf8427e", b"")
