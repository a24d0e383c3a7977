"""
Candidate extraction from UI source text.

Extraction is pattern based, not a parser. Each recognizer is a named
function that scans for one literal shape and returns typed candidates with
their source spans. Every pattern is bounded to a single line or to an
explicitly delimited scope (quotes, brackets, a capped parenthesis scan) so
adversarial input cannot trigger runaway backtracking.

Recognizers run in priority order. A candidate whose span overlaps one
already claimed is dropped, so a color inside a shadow value belongs to the
shadow and a hex inside ``bg-[#fff]`` belongs to the class.

Usage:
    candidates = extract_candidates(text)      # every occurrence, by offset
    by_category = extract(text)                # distinct literals per category
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from .catalog import TokenCategory
from .values import color_to_hex, expand_hex


class CandidateKind(Enum):
    HEX_COLOR = "hex_color"
    RGBA_COLOR = "rgba_color"
    COLOR_CLASS = "color_class"
    VARIABLE_REFERENCE = "variable_reference"
    RADIUS_VALUE = "radius_value"
    RADIUS_ARBITRARY = "radius_arbitrary"
    RADIUS_CLASS = "radius_class"
    SHADOW_VALUE = "shadow_value"
    SHADOW_ARBITRARY = "shadow_arbitrary"
    SHADOW_CLASS = "shadow_class"
    TYPOGRAPHY_GROUP = "typography_group"
    TYPOGRAPHY_CLASS = "typography_class"
    TYPOGRAPHY_VALUE = "typography_value"


class SyntaxContext(Enum):
    CSS_DECLARATION = "css_declaration"
    STYLE_OBJECT = "style_object"
    CLASS_LIST = "class_list"
    INLINE = "inline"


@dataclass(frozen=True)
class ClassPart:
    """One typography utility class inside a class list."""
    text: str
    start: int
    end: int
    dimension: str  # size | weight | line_height


@dataclass(frozen=True)
class Candidate:
    raw_text: str
    kind: CandidateKind
    context: SyntaxContext
    start: int
    end: int
    value: str
    category: Optional[TokenCategory] = None
    prefix: str = ""
    dimension: Optional[str] = None
    parts: Tuple[ClassPart, ...] = ()
    duplicates: Tuple[ClassPart, ...] = ()  # later repeats of a class in parts
    siblings: Tuple[str, ...] = ()

    @property
    def key(self) -> Tuple[str, str, str]:
        """Identity of the literal; occurrences sharing a key are matched once."""
        category = self.category.value if self.category else ""
        return (category, self.dimension or "", self.raw_text)

    @property
    def spans(self) -> List[Tuple[int, int]]:
        if self.parts:
            spans = [(p.start, p.end) for p in self.parts]
        else:
            spans = [(self.start, self.end)]
        return spans + [(p.start, p.end) for p in self.duplicates]

    def to_dict(self) -> Dict[str, object]:
        return {
            "raw_text": self.raw_text,
            "kind": self.kind.value,
            "context": self.context.value,
            "category": self.category.value if self.category else None,
            "value": self.value,
            "start": self.start,
            "end": self.end,
        }


# === CLASS LISTS ===

MAX_CALL_SCAN = 4000

CLASS_ATTR_RE = re.compile(
    r"""(?<![\w-])(?:className|class)\s*=\s*\{?\s*(?:"([^"\n]{0,2000})"|'([^'\n]{0,2000})')"""
)
CLASS_TEMPLATE_RE = re.compile(r"(?<![\w-])className\s*=\s*\{\s*`([^`]{0,2000})`")
CLASS_CALL_RE = re.compile(r"(?<![\w.$])(?:cn|clsx|classNames|twMerge|cva)\s*\(")
STRING_LITERAL_RE = re.compile(r""""([^"\n]{0,2000})"|'([^'\n]{0,2000})'|`([^`]{0,2000})`""")
CLASS_TOKEN_RE = re.compile(r"\S+")

# Variant-prefixed (md:, hover:) and interpolated tokens are never rewritten
_UNSAFE_CLASS_CHARS = set(":${}'\"`")


@dataclass(frozen=True)
class ClassList:
    """Contents of one class attribute or class-helper string argument."""
    start: int
    text: str

    def tokens(self) -> Iterator[Tuple[str, int, int]]:
        for match in CLASS_TOKEN_RE.finditer(self.text):
            token = match.group()
            if _UNSAFE_CLASS_CHARS.intersection(token):
                continue
            yield token, self.start + match.start(), self.start + match.end()

    def all_classes(self) -> Tuple[str, ...]:
        return tuple(CLASS_TOKEN_RE.findall(self.text))


def _first_group(match: re.Match) -> Tuple[int, str]:
    for index in range(1, (match.re.groups or 0) + 1):
        if match.group(index) is not None:
            return match.start(index), match.group(index)
    return match.end(), ""


def _call_end(text: str, open_paren: int) -> Optional[int]:
    """Index of the parenthesis closing ``open_paren``, skipping string contents."""
    depth = 0
    quote = None
    limit = min(len(text), open_paren + MAX_CALL_SCAN)
    for i in range(open_paren, limit):
        char = text[i]
        if quote:
            if char == quote and text[i - 1] != "\\":
                quote = None
            continue
        if char in "'\"`":
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return i
    return None


def find_class_lists(text: str) -> List[ClassList]:
    """Class attributes, className template literals and cn()/clsx()/cva() strings."""
    found: Dict[int, ClassList] = {}

    for pattern in (CLASS_ATTR_RE, CLASS_TEMPLATE_RE):
        for match in pattern.finditer(text):
            start, content = _first_group(match)
            found.setdefault(start, ClassList(start, content))

    for match in CLASS_CALL_RE.finditer(text):
        open_paren = match.end() - 1
        close = _call_end(text, open_paren)
        if close is None:
            continue
        for literal in STRING_LITERAL_RE.finditer(text, open_paren + 1, close):
            start, content = _first_group(literal)
            found.setdefault(start, ClassList(start, content))

    return [found[start] for start in sorted(found)]


# === CONTEXT ===

STYLE_KEY_BEFORE_RE = re.compile(r"[A-Za-z_$][\w$]*\s*:\s*$")
CSS_PROPERTY_BEFORE_RE = re.compile(r"[a-z][a-z-]*\s*:\s*[^;{}'\"`]*$")


def _line_before(text: str, pos: int) -> str:
    line_start = text.rfind("\n", 0, pos) + 1
    return text[max(line_start, pos - 200):pos]


def literal_context(text: str, start: int, end: int) -> Tuple[SyntaxContext, int, int]:
    """
    Classify a bare literal and return its replaceable span.

    A quoted literal that is the value of an object key is a style-object
    value and its span grows to include the quotes.
    """
    if 0 < start and end < len(text) and text[start - 1] in "'\"" and text[end] == text[start - 1]:
        if STYLE_KEY_BEFORE_RE.search(_line_before(text, start - 1)):
            return SyntaxContext.STYLE_OBJECT, start - 1, end + 1
    if CSS_PROPERTY_BEFORE_RE.search(_line_before(text, start)):
        return SyntaxContext.CSS_DECLARATION, start, end
    return SyntaxContext.INLINE, start, end


# === SHADOW RECOGNIZERS ===

SHADOW_DECLARATION_RE = re.compile(
    r"(?<![\w-])box-shadow\s*:\s*([^;{}\n'\"`]{1,300}?)\s*(?=[;}'\"`]|$)", re.MULTILINE
)
SHADOW_STYLE_RE = re.compile(r"(?<![\w$])boxShadow\s*:\s*(['\"])([^'\"\n]{1,300})\1")
SHADOW_ARBITRARY_RE = re.compile(r"(?<![\w:/-])shadow-\[([^\]\s'\"`]{1,300})\]")
SHADOW_CLASS_RE = re.compile(r"^shadow(?:-([a-z0-9][a-z0-9-]*))?$")
SHADOW_KEYWORDS = {"none", "inherit", "initial", "unset", "revert"}


def find_shadow_declarations(text: str, class_lists: List[ClassList]) -> List[Candidate]:
    candidates = []
    for match in SHADOW_DECLARATION_RE.finditer(text):
        raw = match.group(1)
        if raw.lower() in SHADOW_KEYWORDS:
            continue
        candidates.append(Candidate(
            raw_text=raw, kind=CandidateKind.SHADOW_VALUE,
            context=SyntaxContext.CSS_DECLARATION,
            start=match.start(1), end=match.end(1),
            value=raw, category=TokenCategory.SHADOW,
        ))
    return candidates


def find_shadow_styles(text: str, class_lists: List[ClassList]) -> List[Candidate]:
    candidates = []
    for match in SHADOW_STYLE_RE.finditer(text):
        raw = match.group(2).strip()
        if raw.lower() in SHADOW_KEYWORDS:
            continue
        candidates.append(Candidate(
            raw_text=raw, kind=CandidateKind.SHADOW_VALUE,
            context=SyntaxContext.STYLE_OBJECT,
            start=match.start(1), end=match.end(),
            value=raw, category=TokenCategory.SHADOW,
        ))
    return candidates


def find_shadow_arbitrary(text: str, class_lists: List[ClassList]) -> List[Candidate]:
    candidates = []
    for match in SHADOW_ARBITRARY_RE.finditer(text):
        inner = match.group(1)
        if not re.match(r"(?:inset_)?-?\d", inner):
            continue  # shadow-[#000] sets the shadow color, not the shadow
        candidates.append(Candidate(
            raw_text=match.group(), kind=CandidateKind.SHADOW_ARBITRARY,
            context=SyntaxContext.CLASS_LIST,
            start=match.start(), end=match.end(),
            value=inner.replace("_", " "), category=TokenCategory.SHADOW,
            prefix="shadow",
        ))
    return candidates


def find_shadow_classes(text: str, class_lists: List[ClassList]) -> List[Candidate]:
    candidates = []
    for class_list in class_lists:
        for token, start, end in class_list.tokens():
            match = SHADOW_CLASS_RE.match(token)
            if not match:
                continue
            candidates.append(Candidate(
                raw_text=token, kind=CandidateKind.SHADOW_CLASS,
                context=SyntaxContext.CLASS_LIST, start=start, end=end,
                value=match.group(1) or "", category=TokenCategory.SHADOW,
                prefix="shadow",
            ))
    return candidates


# === COLOR CLASS RECOGNIZER ===

COLOR_UTILITY_PREFIXES = (
    r"bg|text|border(?:-[trblxyse])?|fill|stroke|ring-offset|ring|outline|divide"
    r"|from|via|to|accent|caret|decoration|placeholder"
)
COLOR_ARBITRARY_RE = re.compile(
    r"(?<![\w:/-])(" + COLOR_UTILITY_PREFIXES + r")-\["
    r"(#[0-9a-fA-F]{6}|#[0-9a-fA-F]{3}|rgba\([\d.,]{5,40}\)|(?:hsla?\()?var\(--[\w-]+\)\)?)\]"
)


def find_color_arbitrary(text: str, class_lists: List[ClassList]) -> List[Candidate]:
    candidates = []
    for match in COLOR_ARBITRARY_RE.finditer(text):
        literal = match.group(2)
        if literal.startswith("#") or literal.lower().startswith("rgba"):
            value = color_to_hex(literal)
            if value is None:
                continue
        else:
            value = literal
        candidates.append(Candidate(
            raw_text=match.group(), kind=CandidateKind.COLOR_CLASS,
            context=SyntaxContext.CLASS_LIST,
            start=match.start(), end=match.end(),
            value=value, category=TokenCategory.COLOR, prefix=match.group(1),
        ))
    return candidates


# === BORDER RADIUS RECOGNIZERS ===

RADIUS_SIDES = r"tl|tr|bl|br|ss|se|es|ee|t|r|b|l|s|e"
RADIUS_DECLARATION_RE = re.compile(
    r"(?<![\w-])border-radius\s*:\s*(\d+(?:\.\d+)?(?:px|rem)|var\(--[\w-]+\))\s*(?=[;}'\"`]|$)",
    re.MULTILINE,
)
RADIUS_STYLE_RE = re.compile(
    r"(?<![\w$])borderRadius\s*:\s*(?:(['\"])(\d+(?:\.\d+)?(?:px|rem))\1|(\d+(?:\.\d+)?)(?=\s*[,}\n]))"
)
RADIUS_ARBITRARY_RE = re.compile(
    r"(?<![\w:/-])(rounded(?:-(?:" + RADIUS_SIDES + r"))?)-\[(\d+(?:\.\d+)?(?:px|rem))\]"
)
RADIUS_CLASS_RE = re.compile(
    r"^(rounded(?:-(?:" + RADIUS_SIDES + r"))?)(?:-([a-z0-9][a-z0-9-]*))?$"
)


def find_radius_declarations(text: str, class_lists: List[ClassList]) -> List[Candidate]:
    return [
        Candidate(
            raw_text=m.group(1), kind=CandidateKind.RADIUS_VALUE,
            context=SyntaxContext.CSS_DECLARATION,
            start=m.start(1), end=m.end(1),
            value=m.group(1), category=TokenCategory.BORDER_RADIUS,
        )
        for m in RADIUS_DECLARATION_RE.finditer(text)
    ]


def find_radius_styles(text: str, class_lists: List[ClassList]) -> List[Candidate]:
    candidates = []
    for match in RADIUS_STYLE_RE.finditer(text):
        if match.group(2):
            raw, value = match.group(2), match.group(2)
            start, end = match.start(1), match.end()
        else:
            raw = match.group(3)
            value = f"{raw}px"
            start, end = match.start(3), match.end(3)
        candidates.append(Candidate(
            raw_text=raw, kind=CandidateKind.RADIUS_VALUE,
            context=SyntaxContext.STYLE_OBJECT, start=start, end=end,
            value=value, category=TokenCategory.BORDER_RADIUS,
        ))
    return candidates


def find_radius_arbitrary(text: str, class_lists: List[ClassList]) -> List[Candidate]:
    return [
        Candidate(
            raw_text=m.group(), kind=CandidateKind.RADIUS_ARBITRARY,
            context=SyntaxContext.CLASS_LIST,
            start=m.start(), end=m.end(),
            value=m.group(2), category=TokenCategory.BORDER_RADIUS,
            prefix=m.group(1),
        )
        for m in RADIUS_ARBITRARY_RE.finditer(text)
    ]


def find_radius_classes(text: str, class_lists: List[ClassList]) -> List[Candidate]:
    candidates = []
    for class_list in class_lists:
        for token, start, end in class_list.tokens():
            match = RADIUS_CLASS_RE.match(token)
            if not match:
                continue
            candidates.append(Candidate(
                raw_text=token, kind=CandidateKind.RADIUS_CLASS,
                context=SyntaxContext.CLASS_LIST, start=start, end=end,
                value=match.group(2) or "", category=TokenCategory.BORDER_RADIUS,
                prefix=match.group(1),
            ))
    return candidates


# === TYPOGRAPHY RECOGNIZERS ===

TYPOGRAPHY_CLASS_PATTERNS = (
    ("size", re.compile(r"^text-(?:xs|sm|base|lg|xl|[2-9]xl|\[\d+(?:\.\d+)?(?:px|rem)\])$")),
    ("weight", re.compile(
        r"^font-(?:thin|extralight|light|normal|medium|semibold|bold|extrabold|black|\[\d{3}\])$"
    )),
    ("line_height", re.compile(
        r"^leading-(?:none|tight|snug|normal|relaxed|loose|\d+|\[\d*\.?\d+(?:px|rem)?\])$"
    )),
)
TYPOGRAPHY_ARBITRARY_RE = re.compile(
    r"(?<![\w:/-])(?:text-\[(\d+(?:\.\d+)?(?:px|rem))\]|font-\[(\d{3})\])(?![\w-])"
)
TYPOGRAPHY_DECLARATION_RE = re.compile(
    r"(?<![\w-])(font-size|font-weight|line-height)\s*:\s*([^;{}\n'\"`]{1,40}?)\s*(?=[;}'\"`]|$)",
    re.MULTILINE,
)
TYPOGRAPHY_STYLE_RE = re.compile(
    r"(?<![\w$])(fontSize|fontWeight|lineHeight)\s*:\s*"
    r"(?:(['\"])([^'\"\n]{1,40})\2|(\d+(?:\.\d+)?)(?=\s*[,}\n]))"
)
TYPOGRAPHY_VALUE_PATTERNS = {
    "size": re.compile(r"^\d+(?:\.\d+)?(?:px|rem)$"),
    "weight": re.compile(r"^(?:\d{3}|normal|bold)$"),
    "line_height": re.compile(r"^\d*\.?\d+(?:px|rem)?$"),
}
_PROPERTY_DIMENSIONS = {
    "font-size": "size", "fontSize": "size",
    "font-weight": "weight", "fontWeight": "weight",
    "line-height": "line_height", "lineHeight": "line_height",
}


def typography_dimension(class_name: str) -> Optional[str]:
    for dimension, pattern in TYPOGRAPHY_CLASS_PATTERNS:
        if pattern.match(class_name):
            return dimension
    return None


def normalize_typography_value(dimension: str, raw: str, numeric: bool = False) -> Optional[str]:
    value = raw.strip().lower()
    if numeric and dimension == "size":
        value = f"{value}px"
    if not TYPOGRAPHY_VALUE_PATTERNS[dimension].match(value):
        return None
    if dimension == "weight":
        value = {"normal": "400", "bold": "700"}.get(value, value)
    return value


def find_typography_groups(text: str, class_lists: List[ClassList]) -> List[Candidate]:
    """
    One candidate per class list holding text-/font-/leading- utilities.

    At most one class per dimension is taken (the first seen). Two or more
    form a group candidate; a lone class is a single-class candidate. Later
    repeats of a taken class ride along as ``duplicates`` so a rewrite
    removes them too.
    """
    candidates = []
    for class_list in class_lists:
        parts: Dict[str, ClassPart] = {}
        duplicates: List[ClassPart] = []
        for token, start, end in class_list.tokens():
            dimension = typography_dimension(token)
            if not dimension:
                continue
            if dimension not in parts:
                parts[dimension] = ClassPart(token, start, end, dimension)
            elif parts[dimension].text == token:
                duplicates.append(ClassPart(token, start, end, dimension))
        if not parts:
            continue

        ordered = tuple(sorted(parts.values(), key=lambda p: p.start))
        siblings = class_list.all_classes()
        if len(ordered) == 1:
            part = ordered[0]
            candidates.append(Candidate(
                raw_text=part.text, kind=CandidateKind.TYPOGRAPHY_CLASS,
                context=SyntaxContext.CLASS_LIST, start=part.start, end=part.end,
                value=part.text, category=TokenCategory.TYPOGRAPHY,
                dimension=part.dimension, duplicates=tuple(duplicates), siblings=siblings,
            ))
        else:
            raw = " ".join(p.text for p in ordered)
            candidates.append(Candidate(
                raw_text=raw, kind=CandidateKind.TYPOGRAPHY_GROUP,
                context=SyntaxContext.CLASS_LIST,
                start=ordered[0].start, end=ordered[-1].end,
                value=raw, category=TokenCategory.TYPOGRAPHY,
                parts=ordered, duplicates=tuple(duplicates), siblings=siblings,
            ))
    return candidates


def find_typography_arbitrary(text: str, class_lists: List[ClassList]) -> List[Candidate]:
    candidates = []
    for match in TYPOGRAPHY_ARBITRARY_RE.finditer(text):
        dimension = "size" if match.group(1) else "weight"
        candidates.append(Candidate(
            raw_text=match.group(), kind=CandidateKind.TYPOGRAPHY_CLASS,
            context=SyntaxContext.CLASS_LIST,
            start=match.start(), end=match.end(),
            value=match.group(), category=TokenCategory.TYPOGRAPHY,
            dimension=dimension,
        ))
    return candidates


def find_typography_declarations(text: str, class_lists: List[ClassList]) -> List[Candidate]:
    candidates = []
    for match in TYPOGRAPHY_DECLARATION_RE.finditer(text):
        dimension = _PROPERTY_DIMENSIONS[match.group(1)]
        value = normalize_typography_value(dimension, match.group(2))
        if value is None:
            continue
        candidates.append(Candidate(
            raw_text=match.group(2), kind=CandidateKind.TYPOGRAPHY_VALUE,
            context=SyntaxContext.CSS_DECLARATION,
            start=match.start(2), end=match.end(2),
            value=value, category=TokenCategory.TYPOGRAPHY,
            prefix=match.group(1), dimension=dimension,
        ))
    return candidates


def find_typography_styles(text: str, class_lists: List[ClassList]) -> List[Candidate]:
    candidates = []
    for match in TYPOGRAPHY_STYLE_RE.finditer(text):
        dimension = _PROPERTY_DIMENSIONS[match.group(1)]
        if match.group(3) is not None:
            raw = match.group(3)
            value = normalize_typography_value(dimension, raw)
            start, end = match.start(2), match.end()
        else:
            raw = match.group(4)
            value = normalize_typography_value(dimension, raw, numeric=True)
            start, end = match.start(4), match.end(4)
        if value is None:
            continue
        candidates.append(Candidate(
            raw_text=raw, kind=CandidateKind.TYPOGRAPHY_VALUE,
            context=SyntaxContext.STYLE_OBJECT, start=start, end=end,
            value=value, category=TokenCategory.TYPOGRAPHY,
            prefix=match.group(1), dimension=dimension,
        ))
    return candidates


# === BARE COLOR AND VARIABLE RECOGNIZERS ===

HEX_COLOR_RE = re.compile(r"(?<![&\w#])#([0-9a-fA-F]{6}|[0-9a-fA-F]{3})\b")
RGBA_COLOR_RE = re.compile(
    r"(?<![\w-])rgba\(\s*\d{1,3}\s*,\s*\d{1,3}\s*,\s*\d{1,3}\s*,\s*\d*\.?\d+\s*\)", re.IGNORECASE
)
VARIABLE_RE = re.compile(
    r"hsla?\(\s*var\(\s*--([\w-]+)\s*\)\s*\)|(?<![\w-])var\(\s*--([\w-]+)\s*\)"
)
VARIABLE_CATEGORIES = (
    ("color-", TokenCategory.COLOR),
    ("radius-", TokenCategory.BORDER_RADIUS),
    ("shadow-", TokenCategory.SHADOW),
)


def _in_class_list(start: int, class_lists: List[ClassList]) -> bool:
    """Bare literals inside class strings belong to variant or unknown utilities."""
    return any(cl.start <= start < cl.start + len(cl.text) for cl in class_lists)


# Comments and fragment-carrying attribute values hold no styles
LINE_COMMENT_RE = re.compile(r"(?<![:\w/\\])//[^\n]*")
BLOCK_COMMENT_RE = re.compile(r"/\*(?:[^*]|\*(?!/)){0,5000}\*/")
REFERENCE_ATTR_RE = re.compile(
    r"""(?<![\w-])(?:href|xlinkHref|id|htmlFor|to)\s*=\s*\{?\s*(?:"([^"\n]{0,2000})"|'([^'\n]{0,2000})')"""
)


def find_ignored_spans(text: str) -> List[Tuple[int, int]]:
    spans = [m.span() for m in BLOCK_COMMENT_RE.finditer(text)]
    spans.extend(m.span() for m in LINE_COMMENT_RE.finditer(text))
    for match in REFERENCE_ATTR_RE.finditer(text):
        start, content = _first_group(match)
        spans.append((start, start + len(content)))
    return spans


def _ignored(start: int, class_lists: List[ClassList], ignored: List[Tuple[int, int]]) -> bool:
    return _in_class_list(start, class_lists) or any(s <= start < e for s, e in ignored)


def find_hex_colors(text: str, class_lists: List[ClassList]) -> List[Candidate]:
    candidates = []
    ignored = find_ignored_spans(text)
    for match in HEX_COLOR_RE.finditer(text):
        if _ignored(match.start(), class_lists, ignored):
            continue
        context, start, end = literal_context(text, match.start(), match.end())
        candidates.append(Candidate(
            raw_text=match.group(), kind=CandidateKind.HEX_COLOR, context=context,
            start=start, end=end, value=expand_hex(match.group()),
            category=TokenCategory.COLOR,
        ))
    return candidates


def find_rgba_colors(text: str, class_lists: List[ClassList]) -> List[Candidate]:
    candidates = []
    ignored = find_ignored_spans(text)
    for match in RGBA_COLOR_RE.finditer(text):
        if _ignored(match.start(), class_lists, ignored):
            continue
        value = color_to_hex(match.group())
        if value is None:
            continue
        context, start, end = literal_context(text, match.start(), match.end())
        candidates.append(Candidate(
            raw_text=match.group(), kind=CandidateKind.RGBA_COLOR, context=context,
            start=start, end=end, value=value, category=TokenCategory.COLOR,
        ))
    return candidates


def variable_category(name: str) -> Optional[TokenCategory]:
    for prefix, category in VARIABLE_CATEGORIES:
        if name.startswith(prefix):
            return category
    return None


def find_variable_references(text: str, class_lists: List[ClassList]) -> List[Candidate]:
    candidates = []
    ignored = find_ignored_spans(text)
    for match in VARIABLE_RE.finditer(text):
        if _ignored(match.start(), class_lists, ignored):
            continue
        name = match.group(1) or match.group(2)
        context, start, end = literal_context(text, match.start(), match.end())
        candidates.append(Candidate(
            raw_text=match.group(), kind=CandidateKind.VARIABLE_REFERENCE, context=context,
            start=start, end=end, value=f"var(--{name})",
            category=variable_category(name),
        ))
    return candidates


# === PIPELINE ===

Recognizer = Callable[[str, List[ClassList]], List[Candidate]]

# Priority order: earlier recognizers claim their spans first
RECOGNIZERS: Tuple[Recognizer, ...] = (
    find_shadow_declarations,
    find_shadow_styles,
    find_shadow_arbitrary,
    find_shadow_classes,
    find_color_arbitrary,
    find_radius_declarations,
    find_radius_styles,
    find_radius_arbitrary,
    find_radius_classes,
    find_typography_groups,
    find_typography_arbitrary,
    find_typography_declarations,
    find_typography_styles,
    find_hex_colors,
    find_rgba_colors,
    find_variable_references,
)


def _overlaps(span: Tuple[int, int], claimed: List[Tuple[int, int]]) -> bool:
    start, end = span
    return any(start < c_end and c_start < end for c_start, c_end in claimed)


def extract_candidates(text: str) -> List[Candidate]:
    """Every candidate occurrence in ``text``, ordered by offset."""
    class_lists = find_class_lists(text)
    claimed: List[Tuple[int, int]] = []
    accepted: List[Candidate] = []

    for recognizer in RECOGNIZERS:
        for candidate in recognizer(text, class_lists):
            spans = candidate.spans
            if any(_overlaps(span, claimed) for span in spans):
                continue
            claimed.extend(spans)
            accepted.append(candidate)

    accepted.sort(key=lambda c: (c.start, c.end))
    return accepted


def distinct(candidates: List[Candidate]) -> List[Candidate]:
    """First occurrence of each literal, in first-seen order."""
    seen = set()
    result = []
    for candidate in candidates:
        if candidate.key in seen:
            continue
        seen.add(candidate.key)
        result.append(candidate)
    return result


EXTRACTION_GROUPS = ("color", "border_radius", "shadow", "typography", "variable")


def extract(text: str) -> Dict[str, List[Candidate]]:
    """Distinct candidates per category; unclassified variable references under ``variable``."""
    result: Dict[str, List[Candidate]] = {group: [] for group in EXTRACTION_GROUPS}
    for candidate in distinct(extract_candidates(text)):
        group = candidate.category.value if candidate.category else "variable"
        result[group].append(candidate)
    return result


def class_usage(text: str) -> List[str]:
    """Distinct utility classes across all class lists, first-seen order."""
    seen = set()
    classes = []
    for class_list in find_class_lists(text):
        for token, _, _ in class_list.tokens():
            if token not in seen:
                seen.add(token)
                classes.append(token)
    return classes
