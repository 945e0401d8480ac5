"""Usage resolution: which declared classes, methods, packages and assets are unused."""
import os
import posixpath
from collections import Counter
from typing import Dict, Iterable, List, Set

from .census import IdentifierCensus
from .manifest import DeclaredPackage
from .models import (
    AssetFinding,
    Declaration,
    DeclarationKind,
    PackageFinding,
    SymbolFinding,
)

# Shorter file stems ("bg", "ic", "logo"...) match too much unrelated text
MIN_STEM_LENGTH = 4


def relative_path(file_path: str, project_root: str) -> str:
    """Project-relative path with forward slashes."""
    return os.path.relpath(file_path, project_root).replace('\\', '/')


class UsageResolver:
    """Applies the usage heuristics to merged project-wide tables."""

    def __init__(self, project_root: str, declarations: List[Declaration],
                 census: IdentifierCensus, imported_packages: Set[str],
                 literals: Set[str]):
        """Initialize resolver.

        Args:
            project_root: Absolute project root used to relativize paths
            declarations: All declaration sites, in source order
            census: Kind-agnostic identifier counts
            imported_packages: Package names from every package: URI
            literals: Every collected string literal fragment
        """
        self.project_root = project_root
        self.declarations = declarations
        self.census = census
        self.imported_packages = imported_packages
        self.literals = literals
        self.declaration_counts: Dict[DeclarationKind, Counter] = {
            kind: Counter(d.name for d in declarations if d.kind is kind)
            for kind in DeclarationKind
        }

    def is_unused(self, declaration: Declaration) -> bool:
        """A declaration is unused when its declaration sites account for every occurrence.

        Only sites of the same kind are subtracted, but the census itself is
        shared across kinds.
        """
        declared = self.declaration_counts[declaration.kind][declaration.name]
        return self.census.count(declaration.name) <= declared

    def unused_symbols(self, kind: DeclarationKind) -> List[SymbolFinding]:
        return [
            SymbolFinding(
                name=d.name,
                file=relative_path(d.file_path, self.project_root),
                line=d.line,
            )
            for d in self.declarations
            if d.kind is kind and self.is_unused(d)
        ]

    def unused_classes(self) -> List[SymbolFinding]:
        return self.unused_symbols(DeclarationKind.CLASS)

    def unused_methods(self) -> List[SymbolFinding]:
        return self.unused_symbols(DeclarationKind.METHOD)

    def unused_packages(self, declared: Iterable[DeclaredPackage]) -> List[PackageFinding]:
        """Declared packages never named by an import/export URI, sorted by name."""
        findings = [
            PackageFinding(name=package.name, line=package.line)
            for package in declared
            if package.name not in self.imported_packages
        ]
        findings.sort(key=lambda f: f.name)
        return findings

    def is_asset_referenced(self, asset_path: str) -> bool:
        """Substring heuristic over literal fragments.

        Matches the full relative path, the basename, or the extension-less
        stem when the stem is longer than three characters.
        """
        basename = posixpath.basename(asset_path)
        stem = posixpath.splitext(basename)[0]
        check_stem = len(stem) >= MIN_STEM_LENGTH
        for literal in self.literals:
            if asset_path in literal or basename in literal:
                return True
            if check_stem and stem in literal:
                return True
        return False

    def unused_assets(self, declared: Iterable[str]) -> List[AssetFinding]:
        return [
            AssetFinding(path=asset)
            for asset in declared
            if not self.is_asset_referenced(asset)
        ]
