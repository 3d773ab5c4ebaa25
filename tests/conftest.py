"""
Pytest configuration and fixtures for artifact-deploy tests.
"""

import io
import tarfile
import zipfile
from pathlib import Path
from typing import Dict

import pytest

from artifact_deploy.models import DeploymentTarget


def make_tarball(path: Path, files: Dict[str, bytes], mode: str = "w:gz") -> Path:
    """Write a tarball holding `files` (member name -> content)"""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(path, mode) as tf:
        for name, data in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o644
            tf.addfile(info, io.BytesIO(data))
    return path


def make_zip(path: Path, files: Dict[str, bytes]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as zf:
        for name, data in files.items():
            zf.writestr(name, data)
    return path


@pytest.fixture(autouse=True)
def isolated_cache(tmp_path, monkeypatch):
    """Keep the default artifact cache inside the test directory"""
    monkeypatch.setenv("ARTIFACT_DEPLOY_CACHE", str(tmp_path / "env-cache"))


@pytest.fixture
def deploy_to(tmp_path) -> Path:
    return tmp_path / "srv" / "app"


@pytest.fixture
def cache_root(tmp_path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def artifacts(tmp_path) -> Path:
    """Directory holding source artifacts"""
    path = tmp_path / "artifacts"
    path.mkdir()
    return path


@pytest.fixture
def make_target(deploy_to, cache_root):
    """Factory for targets rooted in the test directory"""

    def factory(version: str = "1.0.0", artifact_location=None, **fields) -> DeploymentTarget:
        if artifact_location is None:
            artifact_location = str(cache_root.parent / "artifacts" / f"app-{version}.tar.gz")
        return DeploymentTarget(
            name=fields.pop("name", "app"),
            deploy_to=deploy_to,
            version=version,
            artifact_location=str(artifact_location),
            cache_root=cache_root,
            **fields,
        )

    return factory


@pytest.fixture
def app_tarball(artifacts):
    """Factory writing app-<version>.tar.gz under the artifacts directory"""

    def factory(version: str, files: Dict[str, bytes] = None) -> Path:
        files = files or {
            "bin/start.sh": b"#!/bin/sh\necho " + version.encode() + b"\n",
            "VERSION": version.encode(),
        }
        return make_tarball(artifacts / f"app-{version}.tar.gz", files)

    return factory
