"""
Component analysis: which hardcoded style literals a component contains.

Only presentational files (.tsx/.jsx by default) are analyzed; everything
else is skipped silently. A file that fails to analyze is recorded in
``errors`` and the rest of the batch continues.
"""

import logging
import re
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Iterable, List, Sequence, Set

from .catalog import TokenCategory
from .extractor import Candidate, CandidateKind, class_usage, extract
from .files import PRESENTATIONAL_EXTENSIONS, FileLike, coerce_files, is_presentational

logger = logging.getLogger(__name__)

IMPORT_RE = re.compile(r"""import\s+\{\s*([^}]{1,500}?)\s*\}\s+from\s+["']([^"'\n]+)["'];?""")
TOKEN_IMPORT_NAMES = {"colors", "shadows", "typography", "borderRadius"}


@dataclass
class TokenImport:
    source: str
    tokens: List[str]


@dataclass
class ComponentAnalysis:
    """Distinct literals found across a component's files, first-seen order."""
    colors: List[str] = field(default_factory=list)
    rgba_colors: List[str] = field(default_factory=list)
    color_classes: List[str] = field(default_factory=list)
    border_radii: List[str] = field(default_factory=list)
    shadows: List[str] = field(default_factory=list)
    typography: List[str] = field(default_factory=list)
    variable_references: List[str] = field(default_factory=list)
    tailwind_classes: List[str] = field(default_factory=list)
    token_imports: List[TokenImport] = field(default_factory=list)
    files_analyzed: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def literals(self) -> Set[str]:
        """Every literal that a transform restricted to this analysis may rewrite."""
        return set(
            self.colors + self.rgba_colors + self.color_classes + self.border_radii
            + self.shadows + self.typography + self.variable_references
        )

    def allows(self, candidate: Candidate) -> bool:
        allowed = self.literals()
        return candidate.raw_text in allowed or candidate.value in allowed

    @property
    def is_empty(self) -> bool:
        return not self.literals()

    def counts(self) -> Dict[str, int]:
        return {
            "colors": len(self.colors),
            "rgba_colors": len(self.rgba_colors),
            "color_classes": len(self.color_classes),
            "border_radii": len(self.border_radii),
            "shadows": len(self.shadows),
            "typography": len(self.typography),
            "variable_references": len(self.variable_references),
            "tailwind_classes": len(self.tailwind_classes),
        }

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComponentAnalysis":
        imports = [TokenImport(**item) for item in data.get("token_imports", [])]
        known = {k: list(v) for k, v in data.items() if k in cls.__dataclass_fields__ and k != "token_imports"}
        return cls(token_imports=imports, **known)


def _add(target: List[str], value: str):
    if value not in target:
        target.append(value)


def extract_token_imports(content: str) -> List[TokenImport]:
    """Named imports that come from a token or design-system module."""
    imports = []
    for match in IMPORT_RE.finditer(content):
        names = [n.strip() for n in match.group(1).split(",") if n.strip()]
        source = match.group(2)
        is_token_import = (
            "tokens" in source
            or "design-system" in source
            or any(n in TOKEN_IMPORT_NAMES or "token" in n.lower() for n in names)
        )
        if is_token_import:
            imports.append(TokenImport(source=source, tokens=names))
    return imports


SPACING_PREFIXES = (
    "p-", "px-", "py-", "pt-", "pr-", "pb-", "pl-", "m-", "mx-", "my-", "mt-", "mr-",
    "mb-", "ml-", "gap-", "space-x-", "space-y-",
)
TYPOGRAPHY_PREFIXES = ("font-", "text-", "leading-", "tracking-", "align-")
LAYOUT_PREFIXES = ("flex", "grid", "justify-", "items-", "self-", "col-", "row-")
TEXT_SIZE_RE = re.compile(r"^text-(?:xs|sm|base|lg|xl|[2-9]xl|\[\d)")
BORDER_WIDTH_RE = re.compile(r"^border(?:-[trblxy])?-(?:0|2|4|8|\[\d)")


def categorize_classes(classes: Iterable[str]) -> Dict[str, List[str]]:
    """Group utility classes into color, spacing, typography, layout and other."""
    categories: Dict[str, List[str]] = {
        "color": [], "spacing": [], "typography": [], "layout": [], "other": [],
    }
    for cls in classes:
        if (
            (cls.startswith("text-") and not TEXT_SIZE_RE.match(cls))
            or cls.startswith("bg-")
            or (cls.startswith("border-") and not BORDER_WIDTH_RE.match(cls))
        ):
            categories["color"].append(cls)
        elif cls.startswith(SPACING_PREFIXES):
            categories["spacing"].append(cls)
        elif cls.startswith(TYPOGRAPHY_PREFIXES):
            categories["typography"].append(cls)
        elif cls.startswith(LAYOUT_PREFIXES):
            categories["layout"].append(cls)
        else:
            categories["other"].append(cls)
    return categories


def _collect(analysis: ComponentAnalysis, candidates: Dict[str, List[Candidate]]):
    for candidate in candidates["color"]:
        if candidate.kind is CandidateKind.HEX_COLOR:
            _add(analysis.colors, candidate.value)
        elif candidate.kind is CandidateKind.RGBA_COLOR:
            _add(analysis.rgba_colors, candidate.raw_text)
        elif candidate.kind is CandidateKind.COLOR_CLASS:
            _add(analysis.color_classes, candidate.raw_text)
        else:
            _add(analysis.variable_references, candidate.raw_text)

    groups = (
        (TokenCategory.BORDER_RADIUS, analysis.border_radii),
        (TokenCategory.SHADOW, analysis.shadows),
        (TokenCategory.TYPOGRAPHY, analysis.typography),
    )
    for category, target in groups:
        for candidate in candidates[category.value]:
            if candidate.kind is CandidateKind.VARIABLE_REFERENCE:
                _add(analysis.variable_references, candidate.raw_text)
            else:
                _add(target, candidate.raw_text)

    for candidate in candidates["variable"]:
        _add(analysis.variable_references, candidate.raw_text)


def analyze(
    files: Iterable[FileLike],
    extensions: Sequence[str] = PRESENTATIONAL_EXTENSIONS,
) -> ComponentAnalysis:
    """
    Analyze component files for literals that could become token references.

    Args:
        files: ``ComponentFile`` records or ``{name, path, content}`` dicts
        extensions: file extensions treated as presentational

    Returns:
        ComponentAnalysis with per-category literal lists and class usage
    """
    analysis = ComponentAnalysis()

    for file in coerce_files(files):
        if not is_presentational(file, extensions):
            continue
        try:
            _collect(analysis, extract(file.content))
            for cls in class_usage(file.content):
                _add(analysis.tailwind_classes, cls)
            analysis.token_imports.extend(extract_token_imports(file.content))
            analysis.files_analyzed.append(file.path)
        except Exception as e:
            logger.warning(f"Failed to analyze {file.path}: {e}")
            analysis.errors.append(f"Failed to analyze {file.path}: {e}")

    logger.info(f"Analyzed {len(analysis.files_analyzed)} file(s): {analysis.counts()}")
    return analysis
