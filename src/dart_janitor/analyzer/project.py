"""Project analysis: per-file extraction (map) and project-wide merge (reduce)."""
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Set

from ..config import DEFAULT_CODE_DIR, DEFAULT_MANIFEST
from ..utils.logger import get_logger
from .census import CensusCollector, IdentifierCensus
from .collector import collect_source_files
from .extractor import FRAMEWORK_CALLBACKS, DeclarationExtractor, ImportExtractor
from .literals import StringLiteralCollector
from .manifest import ManifestReader, load_pubspec
from .models import AnalysisReport, Declaration
from .parser import DartParser, ParseResult
from .resolver import UsageResolver
from .walker import NodeKind, TreeWalker

logger = get_logger('project')

# Below this many files a thread pool costs more than it saves
PARALLEL_THRESHOLD = 10

_local = threading.local()


def _thread_parser() -> DartParser:
    """One parser per worker thread; tree-sitter parsers are not shared."""
    parser = getattr(_local, 'parser', None)
    if parser is None:
        parser = _local.parser = DartParser()
    return parser


@dataclass
class FileAnalysis:
    """Everything extracted from a single source file."""
    file_path: str
    declarations: List[Declaration] = field(default_factory=list)
    census: IdentifierCensus = field(default_factory=IdentifierCensus)
    imported_packages: Set[str] = field(default_factory=set)
    literals: Set[str] = field(default_factory=set)


@dataclass
class ProjectIndex:
    """Project-wide tables merged from FileAnalysis results."""
    declarations: List[Declaration] = field(default_factory=list)
    census: IdentifierCensus = field(default_factory=IdentifierCensus)
    imported_packages: Set[str] = field(default_factory=set)
    literals: Set[str] = field(default_factory=set)
    files_analyzed: int = 0
    files_skipped: int = 0

    def merge(self, analysis: FileAnalysis):
        self.declarations.extend(analysis.declarations)
        self.census.merge(analysis.census)
        self.imported_packages.update(analysis.imported_packages)
        self.literals.update(analysis.literals)
        self.files_analyzed += 1


def analyze_source(source_code: bytes, file_path: str,
                   excluded_methods: Iterable[str] = FRAMEWORK_CALLBACKS,
                   parser: Optional[DartParser] = None) -> FileAnalysis:
    """Parse one file's source and analyze the resulting tree."""
    parser = parser or _thread_parser()
    return analyze_parse_result(parser.parse_source(source_code), file_path, excluded_methods)


def analyze_parse_result(result: ParseResult, file_path: str,
                         excluded_methods: Iterable[str] = FRAMEWORK_CALLBACKS) -> FileAnalysis:
    """Run every extractor over a parsed file in a single tree walk."""
    if result.diagnostics:
        logger.debug("%s: %d syntax error(s), using recovered tree",
                     file_path, len(result.diagnostics))

    source_code = result.source
    declarations = DeclarationExtractor(source_code, file_path, excluded_methods)
    census = CensusCollector(source_code)
    imports = ImportExtractor(source_code)
    strings = StringLiteralCollector(source_code)

    (TreeWalker()
        .on(NodeKind.CLASS, declarations.visit_class)
        .on(NodeKind.FUNCTION, declarations.visit_function)
        .on(NodeKind.TOKEN, census.visit_token)
        .on(NodeKind.DIRECTIVE, imports.visit_directive)
        .on(NodeKind.STRING, strings.visit_string)
        .walk(result.tree.root_node))

    return FileAnalysis(
        file_path=file_path,
        declarations=declarations.declarations,
        census=census.census,
        imported_packages=set(imports.packages),
        literals=strings.literals,
    )


def analyze_file(file_path: str,
                 excluded_methods: Iterable[str] = FRAMEWORK_CALLBACKS) -> Optional[FileAnalysis]:
    """Analyze one file from disk.

    Returns:
        FileAnalysis, or None if the file can't be read as UTF-8
    """
    result = _thread_parser().parse_file(file_path)
    if result is None:
        logger.debug("Skipping unreadable file %s", file_path)
        return None
    return analyze_parse_result(result, file_path, excluded_methods)


def _map_files(files: List[str], analyze: Callable[[str], Optional[FileAnalysis]],
               max_workers: Optional[int]) -> List[Optional[FileAnalysis]]:
    """Analyze files, returning results in the same order as files."""
    if len(files) < PARALLEL_THRESHOLD or max_workers == 1:
        return [analyze(file_path) for file_path in files]

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(analyze, files))


def build_index(files: List[str],
                excluded_methods: Iterable[str] = FRAMEWORK_CALLBACKS,
                max_workers: Optional[int] = None) -> ProjectIndex:
    """Map every file to a FileAnalysis, then reduce in path order.

    Merging happens on the calling thread after all workers finish, so the
    index is identical whatever the worker count.
    """
    excluded = frozenset(excluded_methods)
    results = _map_files(files, lambda path: analyze_file(path, excluded), max_workers)

    index = ProjectIndex()
    for analysis in results:
        if analysis is None:
            index.files_skipped += 1
            continue
        index.merge(analysis)
    return index


def analyze_project(project_root: str | Path,
                    code_dir: str = DEFAULT_CODE_DIR,
                    manifest_name: str = DEFAULT_MANIFEST,
                    extra_callbacks: Iterable[str] = (),
                    max_workers: Optional[int] = None) -> AnalysisReport:
    """Find unused classes, methods, packages and assets of one project.

    Args:
        project_root: Project directory holding the manifest and code_dir
        code_dir: Source directory relative to the root
        manifest_name: Manifest file name at the root
        extra_callbacks: Method names to exclude on top of FRAMEWORK_CALLBACKS
        max_workers: Thread count for per-file analysis (None: executor default)

    Returns:
        AnalysisReport; all lists are empty when code_dir does not exist
    """
    root = os.path.normpath(os.path.abspath(project_root))
    source_dir = os.path.join(root, code_dir)
    if not os.path.isdir(source_dir):
        logger.info("%s/ directory not found in %s; nothing to analyze", code_dir, root)
        return AnalysisReport()

    files = collect_source_files(source_dir)
    index = build_index(
        files,
        excluded_methods=FRAMEWORK_CALLBACKS | frozenset(extra_callbacks),
        max_workers=max_workers,
    )
    logger.info("Analyzed %d file(s), skipped %d", index.files_analyzed, index.files_skipped)

    manifest = ManifestReader(Path(root), load_pubspec(Path(root), manifest_name))
    resolver = UsageResolver(
        project_root=root,
        declarations=index.declarations,
        census=index.census,
        imported_packages=index.imported_packages,
        literals=index.literals,
    )
    return AnalysisReport(
        unused_classes=resolver.unused_classes(),
        unused_methods=resolver.unused_methods(),
        unused_packages=resolver.unused_packages(manifest.declared_packages()),
        unused_assets=resolver.unused_assets(manifest.declared_assets()),
    )
