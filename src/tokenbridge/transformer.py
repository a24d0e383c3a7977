"""
Rewrites hardcoded style literals into token references.

For each presentational file:
1. extract every candidate occurrence
2. match each distinct literal once
3. for accepted, non-reference matches, build a span edit for every
   occurrence using the reference form for that occurrence's context
4. apply all edits right to left in a single pass

Given a prior analysis, legacy design-system token imports are replaced with
token index accessors before step 1.

Text without an accepted match is never touched. Each file produces its own
``TransformationSummary``; the batch total is their sum, so files can be
processed in any order or in parallel without shared counters.
"""

import difflib
import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .analyzer import IMPORT_RE, ComponentAnalysis, TokenImport
from .catalog import Token, TokenCatalog, TokenCategory, TypographyToken, get_default_catalog, load_catalog
from .config import TransformerConfig
from .extractor import Candidate, CandidateKind, SyntaxContext, extract_candidates
from .files import ComponentFile, FileLike, coerce_files, is_presentational
from .matcher import MatchKind, TokenMatch, TokenMatcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransformationSummary:
    colors_transformed: int = 0
    border_radii_transformed: int = 0
    shadows_transformed: int = 0
    typography_transformed: int = 0
    classes_transformed: int = 0
    token_imports_transformed: int = 0

    def __add__(self, other: "TransformationSummary") -> "TransformationSummary":
        if not isinstance(other, TransformationSummary):
            return NotImplemented
        return TransformationSummary(**{
            f.name: getattr(self, f.name) + getattr(other, f.name) for f in fields(self)
        })

    @property
    def total(self) -> int:
        return (
            self.colors_transformed + self.border_radii_transformed
            + self.shadows_transformed + self.typography_transformed
            + self.token_imports_transformed
        )

    def to_dict(self) -> Dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


CATEGORY_COUNTERS = {
    TokenCategory.COLOR: "colors_transformed",
    TokenCategory.BORDER_RADIUS: "border_radii_transformed",
    TokenCategory.SHADOW: "shadows_transformed",
    TokenCategory.TYPOGRAPHY: "typography_transformed",
}


@dataclass
class Replacement:
    """One distinct literal rewritten in a file."""
    category: str
    original: str
    replacement: str
    token: str
    confidence: float
    reason: str
    occurrences: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "original": self.original,
            "replacement": self.replacement,
            "token": self.token,
            "confidence": round(self.confidence, 4),
            "reason": self.reason,
            "occurrences": self.occurrences,
        }


@dataclass
class FileTransformation:
    original: ComponentFile
    transformed: ComponentFile
    summary: TransformationSummary = field(default_factory=TransformationSummary)
    replacements: List[Replacement] = field(default_factory=list)
    skipped: bool = False
    error: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.original.content != self.transformed.content

    def diff(self) -> str:
        return generate_diff(self.original.content, self.transformed.content, self.original.path)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.original.path,
            "changed": self.changed,
            "skipped": self.skipped,
            "error": self.error,
            "summary": self.summary.to_dict(),
            "replacements": [r.to_dict() for r in self.replacements],
        }


@dataclass
class TransformationResult:
    original_files: List[ComponentFile]
    transformed_files: List[ComponentFile]
    summary: TransformationSummary
    file_results: List[FileTransformation] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def changed_files(self) -> List[ComponentFile]:
        return [r.transformed for r in self.file_results if r.changed]

    def diff(self) -> str:
        return "".join(r.diff() for r in self.file_results if r.changed)

    def to_dict(self, include_content: bool = False) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "summary": self.summary.to_dict(),
            "files": [r.to_dict() for r in self.file_results],
            "errors": list(self.errors),
        }
        if include_content:
            data["transformed_files"] = [f.to_dict() for f in self.transformed_files]
        return data


def generate_diff(original: str, modified: str, filename: str = "component.tsx") -> str:
    """Generate unified diff between original and transformed text."""
    diff = difflib.unified_diff(
        original.splitlines(keepends=True),
        modified.splitlines(keepends=True),
        fromfile=f"a/{filename}",
        tofile=f"b/{filename}",
    )
    return "".join(diff)


# === REFERENCE FORMS ===

@dataclass(frozen=True)
class _Occurrence:
    """All span edits for one occurrence of a literal; applied together or not at all."""
    candidate: Candidate
    edits: Tuple[Tuple[int, int, str], ...]

    @property
    def start(self) -> int:
        return min(start for start, _, _ in self.edits)


def _style_reference(match: TokenMatch, candidate: Candidate, content: str, config: TransformerConfig) -> str:
    """Replacement for a whole style-object value (quotes included when present)."""
    token = match.token
    typography = isinstance(token, TypographyToken)
    if config.style_object_reference == "css_var":
        quote = content[candidate.start] if content[candidate.start] in "'\"" else "'"
        css = token.dimension_var(candidate.dimension) if typography else token.css_var()
        return f"{quote}{css}{quote}"
    if typography:
        return token.dimension_accessor(candidate.dimension)
    return token.accessor()


def _reference_for(match: TokenMatch, candidate: Candidate, content: str, config: TransformerConfig) -> str:
    token = match.token
    if candidate.context is SyntaxContext.STYLE_OBJECT:
        return _style_reference(match, candidate, content, config)
    if candidate.context is SyntaxContext.CLASS_LIST:
        if token.category is TokenCategory.TYPOGRAPHY:
            return token.name
        prefix = candidate.prefix or {
            TokenCategory.COLOR: "bg",
            TokenCategory.BORDER_RADIUS: "rounded",
            TokenCategory.SHADOW: "shadow",
        }[token.category]
        return token.utility_class(prefix)
    if isinstance(token, TypographyToken):
        return token.dimension_var(candidate.dimension)
    return token.css_var()


def _leading_space(content: str, start: int) -> int:
    while start > 0 and content[start - 1] in " \t":
        start -= 1
    return start


def _occurrence_for(
    match: TokenMatch, candidate: Candidate, content: str, config: TransformerConfig
) -> Optional[_Occurrence]:
    if candidate.kind is CandidateKind.TYPOGRAPHY_GROUP:
        matched = [p for p in candidate.parts if p.text in match.matched_classes]
        if not matched:
            return None
        # First matched class becomes the style name; the rest go with the space before them
        edits = [(matched[0].start, matched[0].end, match.token.name)]
        edits.extend((_leading_space(content, p.start), p.end, "") for p in matched[1:])
        edits.extend(_removals(content, candidate, match.matched_classes))
        return _Occurrence(candidate, tuple(edits))

    replacement = _reference_for(match, candidate, content, config)
    if content[candidate.start:candidate.end] == replacement:
        return None
    edits = [(candidate.start, candidate.end, replacement)]
    edits.extend(_removals(content, candidate, (candidate.raw_text,)))
    return _Occurrence(candidate, tuple(edits))


def _removals(content: str, candidate: Candidate, classes: Tuple[str, ...]) -> List[Tuple[int, int, str]]:
    """Repeated classes are dropped along with the space before them."""
    return [
        (_leading_space(content, p.start), p.end, "")
        for p in candidate.duplicates if p.text in classes
    ]


def _apply(content: str, occurrences: List[_Occurrence]) -> Tuple[str, List[_Occurrence]]:
    """
    Apply occurrences right to left in one pass.

    An occurrence any of whose spans overlaps an already kept span is dropped
    whole, so no literal is ever left half rewritten.
    """
    kept: List[_Occurrence] = []
    claimed: List[Tuple[int, int]] = []
    for occurrence in sorted(occurrences, key=lambda o: o.start):
        spans = [(start, end) for start, end, _ in occurrence.edits]
        if any(s < c_end and c_start < e for s, e in spans for c_start, c_end in claimed):
            logger.debug(f"Dropping overlapping edit for {occurrence.candidate.raw_text!r}")
            continue
        kept.append(occurrence)
        claimed.extend(spans)

    return _splice(content, [edit for o in kept for edit in o.edits]), kept


def _splice(content: str, edits: List[Tuple[int, int, str]]) -> str:
    for start, end, text in sorted(edits, key=lambda e: e[0], reverse=True):
        content = content[:start] + text + content[end:]
    return content


# === TOKEN IMPORTS ===

TOKEN_INDEX_MODULE = "@tokens/token-index"
LEGACY_TOKEN_MODULES = ("design-token", "design-system")

# Legacy token object -> category and the accessors imported in its place
TOKEN_OBJECTS: Dict[str, Tuple[TokenCategory, Tuple[str, ...]]] = {
    "colors": (TokenCategory.COLOR, ("getAllColorTokens", "getColorToken", "getColorValue")),
    "borderRadius": (
        TokenCategory.BORDER_RADIUS,
        ("getAllBorderRadiusTokens", "getBorderRadiusToken", "getBorderRadiusValue"),
    ),
    "shadows": (TokenCategory.SHADOW, ("getAllShadowTokens", "getShadowToken", "getShadowValue")),
    "typography": (TokenCategory.TYPOGRAPHY, ("getAllTypographyStyles", "getTypographyStyle")),
}

# Legacy object keys that don't kebab-case into a token name
LEGACY_MEMBER_NAMES: Dict[str, Dict[str, str]] = {
    "borderRadius": {
        "3xSmall": "radius-3xs",
        "2xSmall": "radius-2xs",
        "1xSmall": "radius-xs",
        "xs3": "radius-3xs",
        "xs2": "radius-2xs",
        "xs1": "radius-xs",
        "small": "radius-sm",
        "medium": "radius-md",
    },
    "shadows": {
        "outerDark9": "shadow-outer-dark",
        "outerMedium16": "shadow-outer-medium-16",
        "outerMedium12": "shadow-outer-medium-12",
        "outerTooltip": "shadow-tooltip",
        "outerLight10": "shadow-outer-light",
        "outerExtraLight3": "shadow-outer-extra-light",
        "boxShadowInner": "shadow-inner",
    },
}
TOKEN_NAME_PREFIXES = {"colors": "", "borderRadius": "radius-", "shadows": "shadow-", "typography": "text-"}

CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])([A-Z])")


def camel_to_kebab(name: str) -> str:
    return CAMEL_BOUNDARY_RE.sub(r"-\1", name).lower()


def _member_pattern(obj: str) -> "re.Pattern[str]":
    # colors.oliviaBlue, borderRadius['2xSmall']; a trailing .value is part of the access
    value_suffix = "" if obj == "typography" else r"(\.value\b)?"
    return re.compile(
        rf"(?<![\w$.]){obj}(?:\.([A-Za-z_$][\w$]*)|\[\s*(['\"])([\w-]+)\2\s*\]){value_suffix}"
    )


def resolve_legacy_member(catalog: TokenCatalog, obj: str, member: str) -> Optional[Token]:
    """Catalog token a legacy ``<obj>.<member>`` access stands for, if any."""
    category = TOKEN_OBJECTS[obj][0]
    kebab = camel_to_kebab(member)
    names = [LEGACY_MEMBER_NAMES.get(obj, {}).get(member), kebab, TOKEN_NAME_PREFIXES[obj] + kebab]
    for name in names:
        if name:
            token = catalog.lookup(category, name)
            if token is not None:
                return token
    return None


def transform_token_imports(
    content: str, token_imports: Sequence[TokenImport], catalog: TokenCatalog
) -> Tuple[str, List[Replacement]]:
    """
    Replace legacy design-system token objects with token index accessors.

    ``import { colors } from '../design-system/tokens'`` becomes an import of
    the color accessors from the token index and ``colors.oliviaBlue``
    becomes ``getColorValue('olivia-blue')``. An object is converted only
    when every use of it in the file is a member access naming a catalog
    token; otherwise its import and uses are left as they are. Names with no
    accessor counterpart stay on the legacy import.

    Returns:
        (new content, replacements); import rewrites have category ``token_import``
    """
    sources = {
        item.source for item in token_imports
        if any(marker in item.source for marker in LEGACY_TOKEN_MODULES)
    }
    statements = [m for m in IMPORT_RE.finditer(content) if m.group(2) in sources]
    if not statements:
        return content, []

    # Same offsets as content, with the import statements blanked out
    body = _splice(content, [(m.start(), m.end(), " " * (m.end() - m.start())) for m in statements])
    imported = {name.strip() for m in statements for name in m.group(1).split(",")}

    edits: List[Tuple[int, int, str]] = []
    replacements: List[Replacement] = []
    converted: List[str] = []
    for obj, (category, _) in TOKEN_OBJECTS.items():
        if obj not in imported:
            continue
        accesses = []
        for access in _member_pattern(obj).finditer(body):
            token = resolve_legacy_member(catalog, obj, access.group(1) or access.group(3))
            accesses.append((access, token))
        # Object keys named like the token object are not uses
        uses = len(re.findall(rf"(?<![\w$.]){obj}(?![\w$]|\s*:(?!:))", body))
        if uses != len(accesses) or any(token is None for _, token in accesses):
            logger.warning(f"Keeping legacy {obj} import: not every use names a {category.value} token")
            continue

        converted.append(obj)
        by_text: Dict[str, List[Token]] = {}
        for access, token in accesses:
            edits.append((access.start(), access.end(), token.accessor()))
            by_text.setdefault(access.group(), []).append(token)
        for text, group in by_text.items():
            token = group[0]
            replacements.append(Replacement(
                category=category.value,
                original=text,
                replacement=token.accessor(),
                token=token.name,
                confidence=1.0,
                reason=f"Legacy {obj} member",
                occurrences=len(group),
            ))

    emitted: Set[str] = set()
    for statement in statements:
        names = [n.strip() for n in statement.group(1).split(",") if n.strip()]
        moved = [n for n in names if n in converted]
        if not moved:
            continue
        accessors = [a for n in moved for a in TOKEN_OBJECTS[n][1] if a not in emitted]
        emitted.update(accessors)
        quote = content[statement.start(2) - 1]
        lines = []
        kept = [n for n in names if n not in converted]
        if kept:
            lines.append(f"import {{ {', '.join(kept)} }} from {quote}{statement.group(2)}{quote};")
        if accessors:
            lines.append(f"import {{ {', '.join(accessors)} }} from {quote}{TOKEN_INDEX_MODULE}{quote};")
        rewritten = "\n".join(lines)
        edits.append((statement.start(), statement.end(), rewritten))
        replacements.append(Replacement(
            category="token_import",
            original=statement.group(),
            replacement=rewritten,
            token=TOKEN_INDEX_MODULE,
            confidence=1.0,
            reason=f"Legacy token import from {statement.group(2)}",
            occurrences=1,
        ))

    return _splice(content, edits), replacements


# === SINGLE FILE ===

def transform_file(
    file: FileLike,
    matcher: Optional[TokenMatcher] = None,
    config: Optional[TransformerConfig] = None,
    analysis: Optional[ComponentAnalysis] = None,
) -> FileTransformation:
    """
    Transform one file. Pure: the input record is not modified.

    Args:
        file: file record
        matcher: matcher bound to a catalog (default catalog if omitted)
        config: transformer config
        analysis: when given, only its literals are rewritten and its legacy
            token imports are replaced with accessor imports
    """
    config = config or TransformerConfig()
    file = coerce_files([file])[0]
    if not is_presentational(file, config.presentational_extensions):
        return FileTransformation(original=file, transformed=file, skipped=True)

    matcher = matcher or TokenMatcher(
        thresholds=config.thresholds, resolve_default_scale=config.resolve_default_scale
    )
    content = file.content
    import_replacements: List[Replacement] = []
    if analysis is not None and analysis.token_imports:
        content, import_replacements = transform_token_imports(
            content, analysis.token_imports, matcher.catalog
        )

    grouped: Dict[Tuple[str, str, str], List[Candidate]] = {}
    for candidate in extract_candidates(content):
        grouped.setdefault(candidate.key, []).append(candidate)

    pending: List[_Occurrence] = []
    matches: Dict[Tuple[str, str, str], Tuple[TokenMatch, Candidate]] = {}
    for key, group in grouped.items():
        first = group[0]
        if analysis is not None and not analysis.allows(first):
            continue
        match = matcher.match(first)
        if not matcher.accepts(match) or match.kind is MatchKind.REFERENCE:
            continue
        matches[key] = (match, first)
        for candidate in group:
            if candidate.siblings and matcher.typography_reference(candidate.siblings):
                continue
            occurrence = _occurrence_for(match, candidate, content, config)
            if occurrence is not None:
                pending.append(occurrence)

    new_content, applied = _apply(content, pending)

    applied_by_key: Dict[Tuple[str, str, str], List[Candidate]] = {}
    for occurrence in applied:
        applied_by_key.setdefault(occurrence.candidate.key, []).append(occurrence.candidate)

    counters = {name: 0 for name in CATEGORY_COUNTERS.values()}
    classes = 0
    replacements = list(import_replacements)
    for key, candidates in applied_by_key.items():
        match, first = matches[key]
        counters[CATEGORY_COUNTERS[match.token.category]] += 1
        if any(c.context is SyntaxContext.CLASS_LIST for c in candidates):
            classes += 1
        replacements.append(Replacement(
            category=match.token.category.value,
            original=first.raw_text,
            replacement=_reference_for(match, first, content, config),
            token=match.token.name,
            confidence=match.confidence,
            reason=match.reason,
            occurrences=len(candidates),
        ))

    imports = sum(1 for r in import_replacements if r.category == "token_import")
    summary = TransformationSummary(
        classes_transformed=classes, token_imports_transformed=imports, **counters
    )
    if replacements:
        logger.info(f"{file.path}: {summary.to_dict()}")
    return FileTransformation(
        original=file,
        transformed=file.with_content(new_content),
        summary=summary,
        replacements=replacements,
    )


# === BATCH ===

def transform(
    files: Iterable[FileLike],
    analysis: Optional[ComponentAnalysis] = None,
    catalog: Optional[TokenCatalog] = None,
    config: Optional[TransformerConfig] = None,
) -> TransformationResult:
    """
    Transform a batch of component files.

    Files are independent and may run in parallel; results keep input order.
    A failure in one file is logged and recorded, its original content is
    returned unchanged, and the rest of the batch continues.

    Args:
        files: ``ComponentFile`` records or ``{name, path, content}`` dicts
        analysis: optional prior analysis; restricts rewrites to its literals
            and drives the legacy token import rewrite
        catalog: token catalog (config's catalog_path or bundled default)
        config: transformer config

    Returns:
        TransformationResult with transformed files and the summed summary
    """
    config = config or TransformerConfig()
    if catalog is None:
        catalog = load_catalog(config.catalog_path) if config.catalog_path else get_default_catalog()
    matcher = TokenMatcher(
        catalog=catalog,
        thresholds=config.thresholds,
        resolve_default_scale=config.resolve_default_scale,
    )
    records = coerce_files(files)

    def run_one(file: ComponentFile) -> FileTransformation:
        try:
            return transform_file(file, matcher=matcher, config=config, analysis=analysis)
        except Exception as e:
            logger.error(f"Failed to transform {file.path}: {e}")
            return FileTransformation(
                original=file, transformed=file,
                error=f"Failed to transform {file.path}: {e}",
            )

    if config.max_workers > 1 and len(records) > 1:
        with ThreadPoolExecutor(max_workers=config.max_workers, thread_name_prefix="tokenbridge") as executor:
            results = list(executor.map(run_one, records))
    else:
        results = [run_one(f) for f in records]

    summary = TransformationSummary()
    for result in results:
        summary = summary + result.summary

    return TransformationResult(
        original_files=records,
        transformed_files=[r.transformed for r in results],
        summary=summary,
        file_results=results,
        errors=[r.error for r in results if r.error],
    )
