import json
import os

ROOT_DIR = os.path.dirname(os.path.abspath(__file__))
FIXTURES_DIR = os.path.join(ROOT_DIR, "fixtures")

DOCKER_MANIFEST_LIST_DIGEST = (
    "sha256:e588eb8123f2031a41f2e60bc27f30a4388e181e07410aff392f7dc96b585969"
)
DOCKER_MANIFEST_DIGEST = (
    "sha256:888206c77cd2811ec47e752ba291e5b7734e3ef137dfd222daadaca39a9f17bc"
)


def fixture_path(name: str) -> str:
    return os.path.join(FIXTURES_DIR, name)


def read_fixture(name: str) -> str:
    with open(fixture_path(name), "r", encoding="utf-8") as f:
        return f.read()


def read_fixture_bytes(name: str) -> bytes:
    with open(fixture_path(name), "rb") as f:
        return f.read()


def load_fixture(name: str) -> dict:
    return json.loads(read_fixture(name))


def write_document(tmp_path, name: str, document) -> str:
    path = tmp_path / name
    if isinstance(document, str):
        path.write_text(document)
    else:
        path.write_text(json.dumps(document, indent=4))
    return str(path)
