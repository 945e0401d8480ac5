"""Tests for pubspec.yaml reading: packages, assets and exclusions."""
import pytest

from dart_janitor.analyzer.manifest import (
    ManifestError,
    ManifestReader,
    Pubspec,
    is_env_file,
    load_pubspec,
)
from dart_janitor.analyzer.models import AssetFinding
from dart_janitor.analyzer.project import analyze_project

PUBSPEC = """
name: demo_app
environment:
  sdk: ">=3.0.0 <4.0.0"

dependencies:
  flutter:
    sdk: flutter
  http: ^1.1.0
  intl: ^0.18.0

dev_dependencies:
  flutter_test:
    sdk: flutter
  mockito: ^5.4.0

flutter:
  assets:
    - assets/images/
    - assets/data/config.json
    - assets/missing.png
    - .env
  fonts:
    - family: Roboto
      fonts:
        - asset: assets/images/Roboto-Regular.ttf
        - asset: assets/images/Roboto-Bold.ttf
          weight: 700
"""


@pytest.fixture
def reader(project):
    project.pubspec(PUBSPEC)
    project.asset("assets/images/logo.png")
    project.asset("assets/images/banner.jpg")
    project.asset("assets/images/Roboto-Regular.ttf")
    project.asset("assets/images/nested/deep.png")
    project.file("assets/data/config.json", "{}")
    project.file(".env", "API_KEY=secret")
    return ManifestReader(project.root, load_pubspec(project.root))


class TestPackages:
    """Declared package extraction."""

    def test_sdk_packages_are_skipped(self, reader):
        names = [p.name for p in reader.declared_packages()]
        assert names == ["http", "intl", "mockito"]

    def test_line_numbers_come_from_text_scan(self, reader):
        lines = {p.name: p.line for p in reader.declared_packages()}
        assert lines == {"http": 8, "intl": 9, "mockito": 14}

    def test_package_without_version_is_declared(self, project):
        project.pubspec("dependencies:\n  path:\n")
        reader = ManifestReader(project.root, load_pubspec(project.root))
        assert [(p.name, p.line) for p in reader.declared_packages()] == [("path", 2)]


class TestAssets:
    """Declared asset expansion and exclusions."""

    def test_directory_entry_expands_to_immediate_files(self, reader):
        assets = reader.declared_assets()
        assert "assets/images/logo.png" in assets
        assert "assets/images/banner.jpg" in assets
        assert "assets/images/nested/deep.png" not in assets

    def test_single_file_entry_kept_only_when_present(self, reader):
        assets = reader.declared_assets()
        assert "assets/data/config.json" in assets
        assert "assets/missing.png" not in assets

    def test_fonts_and_env_files_are_excluded(self, reader):
        assets = reader.declared_assets()
        assert "assets/images/Roboto-Regular.ttf" not in assets
        assert ".env" not in assets

    def test_expanded_order_is_deterministic(self, reader):
        assert reader.declared_assets() == [
            "assets/images/banner.jpg",
            "assets/images/logo.png",
            "assets/data/config.json",
        ]

    def test_map_entries_use_path_key(self, project):
        project.asset("assets/flavor/a.png")
        project.pubspec("""
            flutter:
              assets:
                - path: assets/flavor/
                  flavors: [staging]
        """)
        reader = ManifestReader(project.root, load_pubspec(project.root))
        assert reader.declared_assets() == ["assets/flavor/a.png"]

    def test_directory_outside_project_root(self, project, tmp_path):
        shared = tmp_path / "shared"
        shared.mkdir()
        (shared / "banner.png").write_bytes(b"\x89PNG")
        project.pubspec(f"flutter:\n  assets:\n    - {shared.as_posix()}/\n")
        project.source("main.dart", "void main() {}\n")

        reader = ManifestReader(project.root, load_pubspec(project.root))
        assert reader.declared_assets() == ["../shared/banner.png"]

        report = analyze_project(project.root)
        assert report.unused_assets == [AssetFinding(path="../shared/banner.png")]


class TestFailSoft:
    """Missing or broken manifests degrade to empty results."""

    def test_missing_manifest(self, project):
        assert load_pubspec(project.root) is None
        reader = ManifestReader(project.root, None)
        assert reader.declared_packages() == []
        assert reader.declared_assets() == []

    def test_invalid_yaml(self, project):
        project.pubspec("dependencies: [unclosed\n")
        assert load_pubspec(project.root) is None

    def test_non_mapping_document(self):
        with pytest.raises(ManifestError):
            Pubspec.from_yaml("- just\n- a list\n")

    def test_wrongly_shaped_sections_default_to_empty(self):
        pubspec = Pubspec.from_yaml("dependencies: 3\nflutter:\n  assets: nope\n")
        assert pubspec.dependencies == {}
        assert pubspec.assets == []


@pytest.mark.parametrize("name,expected", [
    (".env", True),
    (".env.production", True),
    ("assets/config/staging.env", True),
    ("assets/environment.json", False),
    ("assets/env.png", False),
])
def test_env_file_convention(name, expected):
    assert is_env_file(name) is expected
