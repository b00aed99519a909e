import shutil

import pytest

from ocischema.schema.registry import SOURCES_DIR, DefinitionRegistry


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    config_file = tmp_path / "ocischema.ini"
    monkeypatch.setenv("OCISCHEMA_CONFIG", str(config_file))
    yield config_file


@pytest.fixture(scope="session")
def registry():
    return DefinitionRegistry.default()


@pytest.fixture(scope="session")
def packaged_sources():
    return {path.name: path.read_text() for path in sorted(SOURCES_DIR.glob("*.json"))}


@pytest.fixture
def schema_dir(tmp_path):
    target = tmp_path / "schemas"
    shutil.copytree(SOURCES_DIR, target)
    yield target
