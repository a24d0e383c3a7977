"""
Tests for token matching.

Tests cover:
- Precedence: reference, alias, exact, approximate
- Color distance threshold
- Border radius allowance and default scale resolution
- Shadow similarity
- Typography groups and single classes
- Rejected matches are reported but not accepted
"""

import pytest

from tokenbridge.catalog import TokenCategory, catalog_from_dict
from tokenbridge.config import MatchThresholds
from tokenbridge.extractor import extract_candidates
from tokenbridge.matcher import MatchKind, TokenMatcher, shadow_similarity
from tokenbridge.values import parse_shadow


def first_match(matcher, text):
    return matcher.match(extract_candidates(text)[0])


class TestColorMatching:
    """Test color matching."""

    def test_exact(self, matcher):
        match = matcher.match_color("#25c9d0")
        assert match.token.name == "olivia-blue"
        assert match.kind is MatchKind.EXACT
        assert match.confidence == 1.0

    def test_short_hex_exact(self, matcher):
        assert matcher.match_color("#fff").token.name == "neutral-white"

    def test_rgba_compares_rgb_only(self, matcher):
        match = matcher.match_color("rgba(37, 201, 208, 0.3)")
        assert match.token.name == "olivia-blue"
        assert match.kind is MatchKind.EXACT

    def test_close_color_accepted(self, matcher):
        match = matcher.match_color("#26C9D1")
        assert match.token.name == "olivia-blue"
        assert match.kind is MatchKind.APPROXIMATE
        assert match.accepted
        assert 0.9 < match.confidence < 1.0

    def test_far_color_rejected(self, matcher):
        match = matcher.match_color("#FF00FF")
        assert match is not None
        assert not match.accepted
        assert not matcher.accepts(match)

    def test_unparseable(self, matcher):
        assert matcher.match_color("red") is None

    def test_stricter_threshold(self, catalog):
        strict = TokenMatcher(catalog=catalog, thresholds=MatchThresholds(color_max_distance=0.001))
        assert not strict.match_color("#26C9D1").accepted


class TestVariables:
    """Test variable references and aliases."""

    def test_reference(self, matcher):
        match = matcher.match_variable("var(--color-olivia-blue)")
        assert match.kind is MatchKind.REFERENCE
        assert match.token.name == "olivia-blue"

    def test_alias(self, matcher):
        match = matcher.match_variable("var(--primary)")
        assert match.kind is MatchKind.ALIAS
        assert match.token.name == "olivia-blue"
        assert match.confidence == 0.95

    def test_radius_reference(self, matcher):
        assert matcher.match_variable("var(--radius-xs)").kind is MatchKind.REFERENCE

    def test_unknown(self, matcher):
        assert matcher.match_variable("var(--brand-glow)") is None

    def test_color_class_with_alias_variable(self, matcher):
        match = first_match(matcher, '<div className="bg-[hsl(var(--destructive))]">')
        assert match.token.name == "danger-red"
        assert match.kind is MatchKind.ALIAS


class TestBorderRadiusMatching:
    """Test border radius matching."""

    def test_exact(self, matcher):
        match = matcher.match_border_radius("4px")
        assert match.token.name == "radius-2xs"
        assert match.kind is MatchKind.EXACT

    def test_rem_converted(self, matcher):
        assert matcher.match_border_radius("0.75rem").token.name == "radius-sm"

    def test_within_allowance(self, matcher):
        # 13px: closest 12px, allowance max(4, 3.25) = 4, confidence 0.75
        match = matcher.match_border_radius("13px")
        assert match.token.name == "radius-sm"
        assert match.confidence == pytest.approx(0.75)
        assert match.accepted

    def test_too_far(self, matcher):
        # 20px: closest 16px, allowance 5, confidence 0.2
        match = matcher.match_border_radius("20px")
        assert match.token.name == "radius-md"
        assert not match.accepted

    def test_unparseable(self, matcher):
        assert matcher.match_border_radius("auto") is None

    @pytest.mark.parametrize("size,expected,kind", [
        ("lg", "radius-xs", MatchKind.EXACT),
        ("", "radius-2xs", MatchKind.EXACT),
        ("xl", "radius-sm", MatchKind.EXACT),
        ("2xl", "radius-md", MatchKind.EXACT),
    ])
    def test_default_scale(self, matcher, size, expected, kind):
        match = matcher.match_radius_class(size)
        assert match.token.name == expected
        assert match.kind is kind
        assert match.accepted

    def test_existing_token_class(self, matcher):
        match = matcher.match_radius_class("sm")
        assert match.kind is MatchKind.REFERENCE

    def test_default_scale_disabled(self, catalog):
        plain = TokenMatcher(catalog=catalog, resolve_default_scale=False)
        match = plain.match_radius_class("lg")
        assert not plain.accepts(match)

    def test_full_is_not_rewritten(self, matcher):
        assert not matcher.accepts(matcher.match_radius_class("full"))


class TestShadowMatching:
    """Test shadow matching."""

    def test_exact_ignores_spacing(self, matcher):
        match = matcher.match_shadow("0px 2px 8px 0px rgba(0,0,0,0.20)")
        assert match.token.name == "shadow-tooltip"
        assert match.kind is MatchKind.EXACT

    def test_similar(self, matcher):
        match = matcher.match_shadow("0px 1px 3px 0px rgba(0, 0, 0, 0.11)")
        assert match.token.name == "shadow-outer-extra-light"
        assert match.kind is MatchKind.APPROXIMATE
        assert match.confidence > 0.99
        assert match.accepted

    def test_dissimilar_rejected(self, matcher):
        match = matcher.match_shadow("40px 40px 80px 0px rgba(0, 0, 0, 1)")
        assert not matcher.accepts(match)

    def test_unparseable(self, matcher):
        assert matcher.match_shadow("none") is None

    def test_inset_never_matches_outer_token(self, matcher):
        match = matcher.match_shadow("inset 0px 1px 3px 0px rgba(0,0,0,0.1)")
        assert match.token.name != "shadow-outer-extra-light"
        assert match.token.name == "shadow-inner"
        assert match.accepted

    def test_outer_never_matches_inset_token(self, matcher):
        match = matcher.match_shadow("0px 1px 2px 0px rgba(0, 0, 0, 0.20)")
        assert match.token.name != "shadow-inner"

    def test_inset_without_inset_tokens(self):
        catalog = catalog_from_dict({"shadows": {
            "soft": {"name": "shadow-soft", "alias": "Soft", "value": "0px 1px 3px 0px rgba(0, 0, 0, 0.10)"},
        }})
        assert TokenMatcher(catalog=catalog).match_shadow("inset 0px 1px 3px 0px rgba(0,0,0,0.1)") is None

    def test_similarity_without_alpha(self):
        a = parse_shadow("0 2px 4px rgb(0, 0, 0)")
        b = parse_shadow("0 2px 4px rgba(0, 0, 0, 0.5)")
        assert a.opacity is None
        assert shadow_similarity(a, b, MatchThresholds()) == 1.0

    def test_existing_token_class(self, matcher):
        assert matcher.match_shadow_class("inner").kind is MatchKind.REFERENCE
        assert matcher.match_shadow_class("tooltip").kind is MatchKind.REFERENCE

    @pytest.mark.parametrize("size,expected", [
        ("sm", "shadow-outer-extra-light"),
        ("", "shadow-outer-extra-light"),
        ("md", "shadow-outer-light"),
    ])
    def test_default_scale(self, matcher, size, expected):
        match = matcher.match_shadow_class(size)
        assert match.token.name == expected
        assert match.accepted

    def test_shadow_color_class(self, matcher):
        assert matcher.match_shadow_class("olivia-blue") is None


class TestTypographyMatching:
    """Test typography matching."""

    def test_full_group(self, matcher, catalog):
        match = first_match(matcher, '<h1 className="text-xl font-semibold leading-7">')
        assert match.token.name == "text-headline-h1"
        assert match.kind is MatchKind.EXACT
        assert match.matched_classes == ("text-xl", "font-semibold", "leading-7")

    def test_group_picks_equal_class_set(self, matcher):
        match = first_match(matcher, '<p className="text-sm font-normal leading-5">')
        assert match.token.classes == ["text-sm", "font-normal", "leading-5"]
        assert match.confidence == 1.0

    def test_partial_group(self, matcher):
        match = first_match(matcher, '<p className="text-sm font-semibold leading-9">')
        assert match.confidence == pytest.approx(2 / 3)
        assert match.accepted
        assert match.matched_classes == ("text-sm", "font-semibold")

    def test_half_group_rejected(self, matcher):
        match = first_match(matcher, '<p className="text-lg font-semibold">')
        assert match.confidence == 0.5
        assert not match.accepted

    def test_single_size(self, matcher):
        match = first_match(matcher, '<p className="text-xl">')
        assert match.token.name == "text-headline-h1"
        assert match.confidence == 0.8
        assert match.accepted

    def test_single_prefers_control_style(self, matcher):
        match = first_match(matcher, '<p className="font-semibold">')
        assert match.token.name == "text-button"
        assert match.confidence == 0.7

    def test_arbitrary_size(self, matcher):
        match = first_match(matcher, '<p className="text-[10px]">')
        assert match.token.name == "text-avatar-sm"

    def test_css_value(self, matcher):
        match = first_match(matcher, ".a { font-size: 20px; }")
        assert match.token.name == "text-headline-h1"

    def test_existing_style_is_reference(self, matcher):
        match = first_match(matcher, '<p className="text-body font-bold">')
        assert match.kind is MatchKind.REFERENCE
        assert match.token.name == "text-body"

    def test_no_match(self, matcher):
        assert first_match(matcher, '<p className="font-thin">') is None


class TestDispatch:
    """Test match() routes by candidate kind."""

    def test_match_routes_categories(self, matcher):
        text = '<div className="rounded-[16px] shadow-[0px_3px_9px_0px_rgba(0,0,0,0.5)] bg-[#E52D2D]">'
        matches = [matcher.match(c) for c in extract_candidates(text)]
        assert [m.token.category for m in matches] == [
            TokenCategory.BORDER_RADIUS, TokenCategory.SHADOW, TokenCategory.COLOR,
        ]
        assert [m.token.name for m in matches] == ["radius-md", "shadow-outer-dark", "danger-red"]

    def test_to_dict(self, matcher):
        data = matcher.match_color("#25C9D0").to_dict()
        assert data == {
            "token": "olivia-blue",
            "category": "color",
            "confidence": 1.0,
            "reason": "Exact color value match",
            "kind": "exact",
            "accepted": True,
        }
