"""Declaration records and the analysis report."""
import json
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Dict, List


class DeclarationKind(str, Enum):
    """Kind of a recorded declaration site."""
    CLASS = "class"
    METHOD = "method"


@dataclass(frozen=True)
class Declaration:
    """A class or method/function declaration site."""
    kind: DeclarationKind
    name: str
    file_path: str  # absolute path of the declaring file
    line: int  # 1-based line of the name token


@dataclass(frozen=True)
class SymbolFinding:
    """An unused class or method."""
    name: str
    file: str  # project-relative, forward slashes
    line: int


@dataclass(frozen=True)
class PackageFinding:
    """A declared package that is never imported or exported."""
    name: str
    line: int  # 1-based line in the manifest


@dataclass(frozen=True)
class AssetFinding:
    """A declared asset that no string literal refers to."""
    path: str


@dataclass(frozen=True)
class AnalysisReport:
    """The result of one analysis run."""
    unused_classes: List[SymbolFinding] = field(default_factory=list)
    unused_methods: List[SymbolFinding] = field(default_factory=list)
    unused_packages: List[PackageFinding] = field(default_factory=list)
    unused_assets: List[AssetFinding] = field(default_factory=list)

    @property
    def total_findings(self) -> int:
        return (len(self.unused_classes) + len(self.unused_methods)
                + len(self.unused_packages) + len(self.unused_assets))

    @property
    def is_clean(self) -> bool:
        return self.total_findings == 0

    def to_dict(self) -> Dict[str, List[Dict]]:
        """Serialise to the report document consumed by editors and CI."""
        return {
            "unused_classes": [asdict(f) for f in self.unused_classes],
            "unused_methods": [asdict(f) for f in self.unused_methods],
            "unused_packages": [asdict(f) for f in self.unused_packages],
            "unused_assets": [asdict(f) for f in self.unused_assets],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)
