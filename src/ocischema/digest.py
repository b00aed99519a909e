import hashlib

SUPPORTED_ALGORITHMS = ("sha256", "sha512")


def _hasher(algorithm: str):
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise ValueError(f"Unsupported digest algorithm {algorithm}")
    return hashlib.new(algorithm)


def calculate_digest(data: bytes, algorithm: str = "sha256") -> str:
    """Digest of raw bytes in the form ``<algorithm>:<lowercase hex>``."""
    hasher = _hasher(algorithm)
    hasher.update(data)
    return f"{algorithm}:{hasher.hexdigest()}"


def calculate_file_digest(file_path: str, algorithm: str = "sha256") -> str:
    """Calculate the digest of a file without reading it into memory at once."""
    hasher = _hasher(algorithm)
    with open(file_path, "rb") as f:
        for byte_block in iter(lambda: f.read(4096), b""):
            hasher.update(byte_block)
    return f"{algorithm}:{hasher.hexdigest()}"


def verify_digest(checksum: str, data: bytes):
    algorithm, sep, _ = checksum.partition(":")
    if not sep:
        raise ValueError(f"Invalid digest {checksum}, expected <algorithm>:<hex>")
    data_checksum = calculate_digest(data, algorithm)
    if checksum != data_checksum:
        raise ValueError(f"Invalid checksum. {checksum} != {data_checksum}")
