from importlib import metadata as importlib_metadata

import pytest

from publication_assistant.utils import logging as project_meta


def _not_installed(name):
    raise importlib_metadata.PackageNotFoundError(name)


@pytest.fixture
def pyproject_dir(tmp_path):
    (tmp_path / "pyproject.toml").write_text(
        '[project]\nname = "from-pyproject"\nversion = "9.9.9"\n', encoding="utf-8"
    )
    nested = tmp_path / "pkg" / "sub"
    nested.mkdir(parents=True)
    return nested


def test_name_and_version_from_installed_metadata(monkeypatch, pyproject_dir):
    monkeypatch.setattr(project_meta.importlib_metadata, "metadata", lambda name: {"Name": "installed-name"})
    monkeypatch.setattr(project_meta.importlib_metadata, "version", lambda name: "1.2.3")

    assert project_meta.get_project_name(start=pyproject_dir) == "installed-name"
    assert project_meta.get_project_version(start=pyproject_dir) == "1.2.3"


def test_source_checkout_falls_back_to_pyproject(monkeypatch, pyproject_dir):
    monkeypatch.setattr(project_meta.importlib_metadata, "metadata", _not_installed)
    monkeypatch.setattr(project_meta.importlib_metadata, "version", _not_installed)

    assert project_meta.get_project_name(start=pyproject_dir) == "from-pyproject"
    assert project_meta.get_project_version(start=pyproject_dir) == "9.9.9"


def test_defaults_when_nothing_is_found(monkeypatch, tmp_path):
    monkeypatch.setattr(project_meta.importlib_metadata, "metadata", _not_installed)
    monkeypatch.setattr(project_meta.importlib_metadata, "version", _not_installed)

    assert project_meta.get_project_name(start=tmp_path, max_up=1, default="svc") == "svc"
    assert project_meta.get_project_version(start=tmp_path, max_up=1) == "unknown"
