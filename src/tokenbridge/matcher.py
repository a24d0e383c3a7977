"""
Token matching.

Given one candidate literal, find the best catalog token and a confidence in
[0, 1]. Precedence, first satisfied wins:

1. Reference  - the literal already names a token (``var(--color-x)``,
                ``rounded-xs``)                                      -> 1.0
2. Alias      - an alternate variable or class name from the catalog's
                alias tables (``var(--primary)``)                      -> 0.95
3. Exact      - normalized value equals a token value                  -> 1.0
4. Approximate - category distance function, accepted above threshold

The matcher returns the best approximate match even when it falls below the
acceptance threshold; ``TokenMatch.accepted`` tells the caller whether to act
on it. Callers must never rewrite an unaccepted match.
"""

import logging
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .catalog import Token, TokenCatalog, TokenCategory, TypographyToken, get_default_catalog
from .config import MatchThresholds
from .extractor import Candidate, CandidateKind, ClassPart, variable_category
from .values import (
    ShadowLayer,
    color_distance,
    color_to_hex,
    format_number,
    normalize_shadow,
    parse_shadow,
    string_similarity,
    to_pixels,
)

logger = logging.getLogger(__name__)


class MatchKind(Enum):
    REFERENCE = "reference"
    ALIAS = "alias"
    EXACT = "exact"
    APPROXIMATE = "approximate"


@dataclass(frozen=True)
class TokenMatch:
    token: Token
    confidence: float
    reason: str
    kind: MatchKind
    accepted: bool = True
    matched_classes: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "token": self.token.name,
            "category": self.token.category.value,
            "confidence": round(self.confidence, 4),
            "reason": self.reason,
            "kind": self.kind.value,
            "accepted": self.accepted,
        }


# === FRAMEWORK DEFAULT SCALES ===
# Tailwind v3 defaults, used to give bare utility classes a value. A project
# may override these; resolution can be turned off with resolve_default_scale.

TAILWIND_RADIUS = {
    "none": 0, "sm": 2, "DEFAULT": 4, "md": 6, "lg": 8, "xl": 12,
    "2xl": 16, "3xl": 24, "full": 9999,
}

# First layer only, written out in px/rgba form
TAILWIND_SHADOWS = {
    "sm": "0px 1px 2px 0px rgba(0, 0, 0, 0.05)",
    "DEFAULT": "0px 1px 3px 0px rgba(0, 0, 0, 0.1)",
    "md": "0px 4px 6px -1px rgba(0, 0, 0, 0.1)",
    "lg": "0px 10px 15px -3px rgba(0, 0, 0, 0.1)",
    "xl": "0px 20px 25px -5px rgba(0, 0, 0, 0.1)",
    "2xl": "0px 25px 50px -12px rgba(0, 0, 0, 0.25)",
}

# Name fragments marking a text style made for one control
CONTROL_STYLE_KEYWORDS = ("button", "link", "input", "tab", "avatar", "tooltip", "subtitle")

ARBITRARY_VALUE_RE = re.compile(r"^[a-z]+-\[(.+)\]$")
VARIABLE_NAME_RE = re.compile(r"--([\w-]+)")


# === SIMILARITY ===

def shadow_similarity(a: ShadowLayer, b: ShadowLayer, thresholds: MatchThresholds) -> float:
    """
    Mean of clamped per-component scores.

    Offsets and blur always count; opacity counts only when both sides
    carry an alpha, otherwise the mean is over three components.
    """
    def score(diff: float, tolerance: float) -> float:
        return max(0.0, 1 - diff / tolerance)

    scores = [
        score(abs(a.offset_x - b.offset_x), thresholds.shadow_offset_tolerance_px),
        score(abs(a.offset_y - b.offset_y), thresholds.shadow_offset_tolerance_px),
        score(abs(a.blur_radius - b.blur_radius), thresholds.shadow_blur_tolerance_px),
    ]
    if a.opacity is not None and b.opacity is not None:
        scores.append(score(abs(a.opacity - b.opacity), thresholds.shadow_opacity_tolerance))
    return sum(scores) / len(scores)


def _percent(value: float) -> str:
    return f"{round(value * 100)}%"


class TokenMatcher:
    """Matches candidates against one catalog with one set of thresholds."""

    def __init__(
        self,
        catalog: Optional[TokenCatalog] = None,
        thresholds: Optional[MatchThresholds] = None,
        resolve_default_scale: bool = True,
    ):
        self.catalog = catalog or get_default_catalog()
        self.thresholds = thresholds or MatchThresholds()
        self.resolve_default_scale = resolve_default_scale

        self._by_property: Dict[TokenCategory, Dict[str, Token]] = {
            category: {t.custom_property: t for t in self.catalog.list_tokens(category)}
            for category in (TokenCategory.COLOR, TokenCategory.BORDER_RADIUS, TokenCategory.SHADOW)
        }
        self._shadow_layers: Dict[str, Optional[ShadowLayer]] = {
            t.name: parse_shadow(t.value) for t in self.catalog.list_tokens(TokenCategory.SHADOW)
        }
        self._typography_names = set(self.catalog.index(TokenCategory.TYPOGRAPHY).names())

    # --- dispatch ---

    def match(self, candidate: Candidate) -> Optional[TokenMatch]:
        if candidate.kind is CandidateKind.VARIABLE_REFERENCE:
            return self.match_variable(candidate.value, candidate.category)
        if candidate.category is TokenCategory.COLOR:
            return self.match_color(candidate.value)
        if candidate.category is TokenCategory.BORDER_RADIUS:
            if candidate.kind is CandidateKind.RADIUS_CLASS:
                return self.match_radius_class(candidate.value)
            return self.match_border_radius(candidate.value)
        if candidate.category is TokenCategory.SHADOW:
            if candidate.kind is CandidateKind.SHADOW_CLASS:
                return self.match_shadow_class(candidate.value)
            return self.match_shadow(candidate.value)
        if candidate.category is TokenCategory.TYPOGRAPHY:
            return self.match_typography(candidate)
        return None

    @staticmethod
    def accepts(match: Optional[TokenMatch]) -> bool:
        return match is not None and match.accepted

    # --- references and aliases ---

    def match_variable(
        self, value: str, category: Optional[TokenCategory] = None
    ) -> Optional[TokenMatch]:
        """``var(--color-x)`` is a reference; ``var(--primary)`` goes through the alias table."""
        found = VARIABLE_NAME_RE.search(value)
        if not found:
            return None
        name = found.group(1)
        categories = [category] if category else [variable_category(name)]

        for cat in categories:
            if cat is None or cat not in self._by_property:
                continue
            token = self._by_property[cat].get(f"--{name}")
            if token is not None:
                return TokenMatch(token, 1.0, f"Already references {token.name}", MatchKind.REFERENCE)

        token = self.catalog.resolve_alias(name, category)
        if token is not None:
            return TokenMatch(
                token, self.thresholds.alias_confidence,
                f"Alias --{name} maps to {token.name}", MatchKind.ALIAS,
            )
        return None

    # --- colors ---

    def match_color(self, value: str) -> Optional[TokenMatch]:
        value = value.strip()
        if "var(" in value:
            return self.match_variable(value, TokenCategory.COLOR)

        hex_value = color_to_hex(value)
        if hex_value is None:
            return None

        best: Optional[Token] = None
        best_distance = 0.0
        for token in self.catalog.list_tokens(TokenCategory.COLOR):
            distance = color_distance(hex_value, token.value)
            if distance is None:
                continue
            if distance == 0:
                return TokenMatch(token, 1.0, "Exact color value match", MatchKind.EXACT)
            if best is None or distance < best_distance:
                best, best_distance = token, distance

        if best is None:
            return None
        confidence = 1 - best_distance
        return TokenMatch(
            best, confidence,
            f"Similar color {best.value} ({_percent(confidence)} match)",
            MatchKind.APPROXIMATE,
            accepted=best_distance < self.thresholds.color_max_distance,
        )

    # --- border radius ---

    def match_border_radius(self, value: str) -> Optional[TokenMatch]:
        value = value.strip()
        if value.startswith("var("):
            return self.match_variable(value, TokenCategory.BORDER_RADIUS)
        px = to_pixels(value, self.thresholds.rem_base_px)
        if px is None:
            return None
        return self._match_radius_px(px)

    def _match_radius_px(self, px: float) -> Optional[TokenMatch]:
        best: Optional[Token] = None
        best_diff = 0.0
        for token in self.catalog.list_tokens(TokenCategory.BORDER_RADIUS):
            token_px = to_pixels(token.value, self.thresholds.rem_base_px)
            if token_px is None:
                continue
            diff = abs(token_px - px)
            if diff == 0:
                return TokenMatch(token, 1.0, "Exact border radius match", MatchKind.EXACT)
            if best is None or diff < best_diff:
                best, best_diff = token, diff

        if best is None:
            return None
        allowance = max(
            self.thresholds.radius_min_allowance_px,
            self.thresholds.radius_allowance_ratio * px,
        )
        confidence = max(0.0, 1 - best_diff / allowance)
        return TokenMatch(
            best, confidence,
            f"Closest radius {best.value} is {format_number(best_diff)}px away ({_percent(confidence)} match)",
            MatchKind.APPROXIMATE,
            accepted=best_diff < allowance and confidence > self.thresholds.radius_min_confidence,
        )

    def match_radius_class(self, size: str) -> Optional[TokenMatch]:
        """Bare ``rounded[-side][-size]`` class; ``size`` is empty for plain ``rounded``."""
        index = self.catalog.index(TokenCategory.BORDER_RADIUS)
        if size:
            token = index.get_by_name(f"radius-{size}")
            if token is not None:
                return TokenMatch(token, 1.0, f"Already uses {token.name}", MatchKind.REFERENCE)

        class_name = f"rounded-{size}" if size else "rounded"
        token = self.catalog.class_alias(class_name, TokenCategory.BORDER_RADIUS)
        if token is not None:
            return TokenMatch(
                token, self.thresholds.alias_confidence,
                f"Class {class_name} maps to {token.name}", MatchKind.ALIAS,
            )

        scale_match = None
        if self.resolve_default_scale:
            px = TAILWIND_RADIUS.get(size or "DEFAULT")
            if px is not None:
                scale_match = self._match_radius_px(float(px))
                if self.accepts(scale_match):
                    return replace(
                        scale_match,
                        reason=f"{class_name} is {px}px by default; {scale_match.reason}",
                    )

        fuzzy = self._match_class_name(size, TokenCategory.BORDER_RADIUS)
        if self.accepts(fuzzy) or scale_match is None:
            return fuzzy
        return scale_match

    # --- shadows ---

    def match_shadow(self, value: str) -> Optional[TokenMatch]:
        value = value.strip()
        if value.startswith("var("):
            return self.match_variable(value, TokenCategory.SHADOW)

        normalized = normalize_shadow(value)
        tokens = self.catalog.list_tokens(TokenCategory.SHADOW)
        for token in tokens:
            if normalize_shadow(token.value) == normalized:
                return TokenMatch(token, 1.0, "Exact shadow value match", MatchKind.EXACT)

        layer = parse_shadow(value)
        if layer is None:
            return None

        best: Optional[Token] = None
        best_similarity = 0.0
        for token in tokens:
            token_layer = self._shadow_layers.get(token.name)
            # An inset shadow never stands in for an outer one, or the reverse
            if token_layer is None or token_layer.inset != layer.inset:
                continue
            similarity = shadow_similarity(layer, token_layer, self.thresholds)
            if similarity > best_similarity:
                best, best_similarity = token, similarity

        if best is None:
            return None
        return TokenMatch(
            best, best_similarity,
            f"Similar shadow value ({_percent(best_similarity)} match)",
            MatchKind.APPROXIMATE,
            accepted=best_similarity > self.thresholds.shadow_min_similarity,
        )

    def match_shadow_class(self, size: str) -> Optional[TokenMatch]:
        """Bare ``shadow[-size]`` class; ``size`` is empty for plain ``shadow``."""
        index = self.catalog.index(TokenCategory.SHADOW)
        if size:
            token = index.get_by_name(f"shadow-{size}")
            if token is not None:
                return TokenMatch(token, 1.0, f"Already uses {token.name}", MatchKind.REFERENCE)
            if self.catalog.lookup(TokenCategory.COLOR, size) is not None:
                return None  # shadow-<color> sets the shadow color

        class_name = f"shadow-{size}" if size else "shadow"
        token = self.catalog.class_alias(class_name, TokenCategory.SHADOW)
        if token is not None:
            return TokenMatch(
                token, self.thresholds.alias_confidence,
                f"Class {class_name} maps to {token.name}", MatchKind.ALIAS,
            )

        scale_match = None
        if self.resolve_default_scale:
            value = TAILWIND_SHADOWS.get(size or "DEFAULT")
            if value is not None:
                scale_match = self.match_shadow(value)
                if self.accepts(scale_match):
                    return replace(
                        scale_match,
                        reason=f"{class_name} is '{value}' by default; {scale_match.reason}",
                    )

        fuzzy = self._match_class_name(size, TokenCategory.SHADOW)
        if self.accepts(fuzzy) or scale_match is None:
            return fuzzy
        return scale_match

    def _match_class_name(self, size: str, category: TokenCategory) -> Optional[TokenMatch]:
        if not size:
            return None
        best: Optional[Token] = None
        best_similarity = 0.0
        for token in self.catalog.list_tokens(category):
            similarity = string_similarity(size, token.suffix)
            if similarity > best_similarity:
                best, best_similarity = token, similarity
        if best is None:
            return None
        return TokenMatch(
            best, best_similarity,
            f"Class name resembles {best.name} ({_percent(best_similarity)} similar)",
            MatchKind.APPROXIMATE,
            accepted=best_similarity > self.thresholds.class_name_min_similarity,
        )

    # --- typography ---

    def match_typography(self, candidate: Candidate) -> Optional[TokenMatch]:
        reference = self.typography_reference(candidate.siblings)
        if reference is not None:
            return reference
        if candidate.kind is CandidateKind.TYPOGRAPHY_GROUP:
            return self.match_typography_group(candidate.parts)
        if candidate.dimension is None:
            return None
        if candidate.kind is CandidateKind.TYPOGRAPHY_CLASS:
            return self.match_typography_single(candidate.dimension, class_name=candidate.value)
        return self.match_typography_single(candidate.dimension, value=candidate.value)

    def typography_reference(self, classes: Sequence[str]) -> Optional[TokenMatch]:
        """A class list already carrying a text style token is left alone."""
        for class_name in classes:
            if class_name in self._typography_names:
                token = self.catalog.lookup(TokenCategory.TYPOGRAPHY, class_name)
                return TokenMatch(token, 1.0, f"Already uses {token.name}", MatchKind.REFERENCE)
        return None

    def match_typography_group(self, parts: Sequence[ClassPart]) -> Optional[TokenMatch]:
        """
        Score = classes equal to the token's class for their dimension,
        divided by the classes present. Ties go to declaration order.
        """
        if not parts:
            return None
        best: Optional[TypographyToken] = None
        best_matched: Tuple[str, ...] = ()
        for token in self.catalog.list_tokens(TokenCategory.TYPOGRAPHY):
            matched = tuple(
                p.text for p in parts
                if self._dimension_matches(token, p.dimension, class_name=p.text)
            )
            if len(matched) > len(best_matched):
                best, best_matched = token, matched

        if best is None:
            return None
        score = len(best_matched) / len(parts)
        return TokenMatch(
            best, score,
            f"{len(best_matched)} of {len(parts)} typography classes match {best.name}",
            MatchKind.EXACT if score == 1.0 else MatchKind.APPROXIMATE,
            accepted=score > self.thresholds.typography_group_min_score,
            matched_classes=best_matched,
        )

    def match_typography_single(
        self, dimension: str, class_name: Optional[str] = None, value: Optional[str] = None
    ) -> Optional[TokenMatch]:
        """One size, weight or line-height; control-specific styles win over generic ones."""
        matches = [
            token for token in self.catalog.list_tokens(TokenCategory.TYPOGRAPHY)
            if self._dimension_matches(token, dimension, class_name=class_name, value=value)
        ]
        if not matches:
            return None
        token = _prefer_specific(matches)
        confidence = {
            "size": self.thresholds.typography_size_confidence,
            "weight": self.thresholds.typography_weight_confidence,
            "line_height": self.thresholds.typography_line_height_confidence,
        }[dimension]
        label = class_name or value
        return TokenMatch(
            token, confidence,
            f"{dimension.replace('_', ' ')} {label} is declared by {token.name}",
            MatchKind.APPROXIMATE,
            accepted=confidence >= self.thresholds.typography_single_min_confidence,
            matched_classes=(class_name,) if class_name else (),
        )

    def _dimension_matches(
        self,
        token: TypographyToken,
        dimension: str,
        class_name: Optional[str] = None,
        value: Optional[str] = None,
    ) -> bool:
        declared = token.dimension(dimension)
        if declared is None:
            return False
        if class_name is not None:
            if class_name == declared.utility_class:
                return True
            arbitrary = ARBITRARY_VALUE_RE.match(class_name)
            if not arbitrary:
                return False
            value = arbitrary.group(1)
        if value is None:
            return False

        if self._values_equal(dimension, value, declared.value):
            return True
        declared_arbitrary = ARBITRARY_VALUE_RE.match(declared.utility_class)
        return bool(declared_arbitrary) and self._values_equal(
            dimension, value, declared_arbitrary.group(1)
        )

    def _values_equal(self, dimension: str, a: str, b: str) -> bool:
        if dimension == "weight":
            return a.strip() == b.strip()
        if dimension == "line_height" and not a.strip().endswith(("px", "rem")):
            try:
                return float(a) == float(b)
            except ValueError:
                return False
        if dimension == "line_height" and not b.strip().endswith(("px", "rem")):
            return False
        a_px = to_pixels(a, self.thresholds.rem_base_px)
        b_px = to_pixels(b, self.thresholds.rem_base_px)
        return a_px is not None and a_px == b_px


def _prefer_specific(tokens: List[TypographyToken]) -> TypographyToken:
    for token in tokens:
        if any(keyword in token.name.split("-") for keyword in CONTROL_STYLE_KEYWORDS):
            return token
    return tokens[0]
