"""pubspec.yaml reader: declared packages and declared assets."""
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..utils.logger import get_logger

logger = get_logger('manifest')

# .env, .env.production, staging.env
ENV_FILE_PATTERN = re.compile(r'^\.env(\..+)?$|^.+\.env$')


class ManifestError(Exception):
    """The manifest exists but does not parse into a YAML mapping."""


@dataclass(frozen=True)
class DeclaredPackage:
    name: str
    line: int


@dataclass
class Pubspec:
    """Typed view of the parts of pubspec.yaml the analysis reads.

    Every section defaults to empty when absent or of the wrong shape.
    """
    text: str = ""
    dependencies: Dict[str, Any] = field(default_factory=dict)
    dev_dependencies: Dict[str, Any] = field(default_factory=dict)
    assets: List[str] = field(default_factory=list)
    font_assets: List[str] = field(default_factory=list)

    @classmethod
    def from_yaml(cls, text: str) -> 'Pubspec':
        """Build from manifest text.

        Raises:
            ManifestError: If the text is not valid YAML or not a mapping
        """
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ManifestError(f"Invalid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ManifestError(f"Expected a mapping, got {type(data).__name__}")

        flutter = _mapping(data.get('flutter'))
        return cls(
            text=text,
            dependencies=_mapping(data.get('dependencies')),
            dev_dependencies=_mapping(data.get('dev_dependencies')),
            assets=_asset_entries(flutter.get('assets')),
            font_assets=_font_assets(flutter.get('fonts')),
        )


def _mapping(value: Any) -> Dict[Any, Any]:
    return value if isinstance(value, dict) else {}


def _sequence(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _asset_entries(value: Any) -> List[str]:
    entries = []
    for entry in _sequence(value):
        # Flavored assets are written as `- path: assets/x/`
        if isinstance(entry, dict):
            entry = entry.get('path')
        if entry is not None:
            entries.append(str(entry))
    return entries


def _font_assets(value: Any) -> List[str]:
    paths = []
    for family in _sequence(value):
        for font in _sequence(_mapping(family).get('fonts')):
            asset = _mapping(font).get('asset')
            if asset is not None:
                paths.append(normalize_path(str(asset)))
    return paths


def normalize_path(path: str) -> str:
    return path.replace('\\', '/')


def is_env_file(path: str) -> bool:
    """True for dotenv-style files, which are loaded by name, not by path literal."""
    return ENV_FILE_PATTERN.match(Path(normalize_path(path)).name) is not None


def load_pubspec(project_root: Path, manifest_name: str = 'pubspec.yaml') -> Optional[Pubspec]:
    """Read and parse the manifest at the project root.

    Returns:
        Pubspec, or None if the file is absent, unreadable, or unparsable
    """
    manifest_path = Path(project_root) / manifest_name
    if not manifest_path.is_file():
        logger.debug("No %s in %s", manifest_name, project_root)
        return None

    try:
        text = manifest_path.read_text(encoding='utf-8')
        return Pubspec.from_yaml(text)
    except (OSError, UnicodeDecodeError, ManifestError) as e:
        logger.debug("Ignoring %s: %s", manifest_path, e)
        return None


class ManifestReader:
    """Derives declared packages and declared assets from a Pubspec."""

    def __init__(self, project_root: Path, pubspec: Optional[Pubspec]):
        self.project_root = Path(project_root)
        self.pubspec = pubspec or Pubspec()

    def declared_packages(self) -> List[DeclaredPackage]:
        """Packages under dependencies/dev_dependencies, minus SDK pseudo-packages.

        Each package keeps the first occurrence across sections.
        """
        line_numbers = self._line_numbers()
        packages: Dict[str, DeclaredPackage] = {}
        for section in (self.pubspec.dependencies, self.pubspec.dev_dependencies):
            for key, value in section.items():
                name = str(key)
                # `flutter: {sdk: flutter}` is part of the SDK, not a pub package
                if isinstance(value, dict) and value.get('sdk') is not None:
                    continue
                if name not in packages:
                    packages[name] = DeclaredPackage(name=name, line=line_numbers.get(name, 1))
        return list(packages.values())

    def _line_numbers(self) -> Dict[str, int]:
        """Map each `key:` to the 1-based line where it first appears.

        Plain text scan: not YAML-position accurate, but stable.
        """
        lines: Dict[str, int] = {}
        for number, line in enumerate(self.pubspec.text.split('\n'), start=1):
            stripped = line.lstrip()
            colon = stripped.find(':')
            if colon > 0:
                lines.setdefault(stripped[:colon].strip(), number)
        return lines

    def declared_assets(self) -> List[str]:
        """Project-relative asset files declared in flutter.assets.

        Directory entries (trailing '/') expand to their immediate files.
        Font files and dotenv files are left out entirely.
        """
        excluded = set(self.pubspec.font_assets)
        assets: List[str] = []
        for entry in self.pubspec.assets:
            for asset in self._expand(entry):
                if asset in excluded or is_env_file(asset):
                    continue
                if asset not in assets:
                    assets.append(asset)
        return assets

    def _expand(self, entry: str) -> List[str]:
        absolute = self.project_root / entry
        if entry.endswith('/') or entry.endswith('\\'):
            if not absolute.is_dir():
                return []
            return [
                normalize_path(os.path.relpath(child, self.project_root))
                for child in sorted(absolute.iterdir())
                if child.is_file() and not child.is_symlink()
            ]
        if absolute.is_file():
            return [normalize_path(entry)]
        return []
