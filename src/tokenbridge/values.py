"""
Parsing and normalization of CSS literal values.

Shared by the extractor (to canonicalize candidates) and the matcher (to
compare them against catalog values). All functions return None instead of
raising when a value cannot be parsed; an unparseable literal is simply not a
match.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
RGBA_RE = re.compile(
    r"^rgba\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d*\.?\d+)\s*\)$",
    re.IGNORECASE,
)
LENGTH_RE = re.compile(r"^(-?\d*\.?\d+)(px|rem)?$")

# One shadow layer: [inset] x y blur [spread] color [inset]
SHADOW_LAYER_RE = re.compile(
    r"^(?:(inset)\s+)?"
    r"(-?\d*\.?\d+)(?:px)?\s+(-?\d*\.?\d+)(?:px)?\s+(-?\d*\.?\d+)(?:px)?"
    r"(?:\s+(-?\d*\.?\d+)(?:px)?)?"
    r"\s+(rgba?\([^)]*\)|#[0-9a-f]{3,8})"
    r"(?:\s+(inset))?$",
    re.IGNORECASE,
)
RGBA_ALPHA_RE = re.compile(r"^rgba\(\s*\d+\s*,\s*\d+\s*,\s*\d+\s*,\s*(\d*\.?\d+)\s*\)$", re.IGNORECASE)
RGB_SLASH_ALPHA_RE = re.compile(r"^rgba?\(\s*\d+\s+\d+\s+\d+\s*/\s*(\d*\.?\d+)(%?)\s*\)$", re.IGNORECASE)

# Maximum possible Euclidean distance between two RGB colors
MAX_RGB_DISTANCE = (255 ** 2 * 3) ** 0.5


# === COLORS ===

def expand_hex(value: str) -> Optional[str]:
    """``#fff`` -> ``#FFFFFF``; None if not a 3 or 6 digit hex color."""
    match = HEX_RE.match(value.strip())
    if not match:
        return None
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return "#" + digits.upper()


def hex_to_rgb(value: str) -> Optional[Tuple[int, int, int]]:
    canonical = expand_hex(value)
    if canonical is None:
        return None
    return (int(canonical[1:3], 16), int(canonical[3:5], 16), int(canonical[5:7], 16))


def rgb_to_hex(r: int, g: int, b: int) -> str:
    return f"#{r:02X}{g:02X}{b:02X}"


def parse_rgba(value: str) -> Optional[Tuple[int, int, int, float]]:
    match = RGBA_RE.match(value.strip())
    if not match:
        return None
    r, g, b = (int(match.group(i)) for i in (1, 2, 3))
    if max(r, g, b) > 255:
        return None
    return r, g, b, float(match.group(4))


def color_to_hex(value: str) -> Optional[str]:
    """Canonical hex for a hex or rgba literal. Alpha is dropped."""
    value = value.strip()
    if value.startswith("#"):
        return expand_hex(value)
    rgba = parse_rgba(value)
    if rgba:
        return rgb_to_hex(*rgba[:3])
    return None


def color_distance(a: str, b: str) -> Optional[float]:
    """Normalized Euclidean RGB distance in [0, 1]."""
    rgb_a = hex_to_rgb(a)
    rgb_b = hex_to_rgb(b)
    if rgb_a is None or rgb_b is None:
        return None
    squared = sum((x - y) ** 2 for x, y in zip(rgb_a, rgb_b))
    return squared ** 0.5 / MAX_RGB_DISTANCE


# === LENGTHS ===

def to_pixels(value: str, rem_base: float = 16.0) -> Optional[float]:
    """``0.5rem`` -> 8.0, ``8px`` -> 8.0. Bare numbers are pixels."""
    match = LENGTH_RE.match(value.strip().lower())
    if not match:
        return None
    number = float(match.group(1))
    if match.group(2) == "rem":
        return number * rem_base
    return number


def format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


# === SHADOWS ===

@dataclass(frozen=True)
class ShadowLayer:
    offset_x: float
    offset_y: float
    blur_radius: float
    spread_radius: float
    opacity: Optional[float]
    inset: bool = False


def normalize_shadow(value: str) -> str:
    """Whitespace, comma spacing and case normalized for exact comparison."""
    value = re.sub(r"\s+", " ", value.strip())
    value = re.sub(r"\(\s*", "(", value)
    value = re.sub(r"\s*\)", ")", value)
    value = re.sub(r"\s*,\s*", ", ", value)
    return value.lower()


def split_layers(value: str) -> List[str]:
    """Split on top-level commas (commas inside rgba() don't count)."""
    layers = []
    depth = 0
    current = []
    for char in value:
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(0, depth - 1)
        if char == "," and depth == 0:
            layers.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    tail = "".join(current).strip()
    if tail:
        layers.append(tail)
    return layers


def _shadow_opacity(color: str) -> Optional[float]:
    if color.startswith("#"):
        return 1.0
    match = RGBA_ALPHA_RE.match(color)
    if match:
        return float(match.group(1))
    match = RGB_SLASH_ALPHA_RE.match(color)
    if match:
        alpha = float(match.group(1))
        return alpha / 100 if match.group(2) else alpha
    return None


def parse_shadow(value: str) -> Optional[ShadowLayer]:
    """
    Parse the first layer of a box-shadow value.

    Only the first comma-separated layer is considered; catalog shadows are
    single-layer. Colors may be rgba(), rgb() or hex. Hex colors count as
    fully opaque; rgb() without alpha yields ``opacity=None``.
    """
    layers = split_layers(normalize_shadow(value))
    if not layers:
        return None
    match = SHADOW_LAYER_RE.match(layers[0])
    if not match:
        return None
    inset_before, x, y, blur, spread, color, inset_after = match.groups()
    return ShadowLayer(
        offset_x=float(x),
        offset_y=float(y),
        blur_radius=float(blur),
        spread_radius=float(spread) if spread else 0.0,
        opacity=_shadow_opacity(color),
        inset=bool(inset_before or inset_after),
    )


# === STRINGS ===

def string_similarity(source: str, target: str) -> float:
    """
    Coarse similarity for utility-class names.

    1.0 for equal strings, 0.8 when one contains the other, otherwise the
    share of source characters that appear anywhere in the target, divided by
    the longer length. Not an edit distance.
    """
    a = source.lower()
    b = target.lower()
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0
    if a in b or b in a:
        return 0.8
    found = sum(1 for char in a if char in b)
    return found / max(len(a), len(b))
