"""
Tests for the transformer.

Tests cover:
- Rewrites per category and syntax context
- Summary counts (once per distinct literal)
- Literals without an accepted match are left alone
- Existing token references are left alone
- Restriction to a prior analysis
- Legacy token imports replaced with accessor imports
- Per-file failure isolation and input order
- Diff generation
"""

from dataclasses import replace

import pytest

from tokenbridge.analyzer import ComponentAnalysis, analyze
from tokenbridge.catalog import catalog_from_dict
from tokenbridge.config import TransformerConfig
from tokenbridge.files import ComponentFile
from tokenbridge.transformer import (
    TransformationSummary,
    camel_to_kebab,
    generate_diff,
    resolve_legacy_member,
    transform,
    transform_file,
)


def make_file(content, path="src/components/Button/Button.tsx"):
    return ComponentFile(name=path.rsplit("/", 1)[-1], path=path, content=content)


def transform_text(content, config=None, path="src/components/Button/Button.tsx", **kwargs):
    result = transform([make_file(content, path)], config=config or TransformerConfig(max_workers=1), **kwargs)
    return result.transformed_files[0].content, result


# =============================================================================
# Reference scenarios
# =============================================================================

class TestScenarios:
    """Test the documented end-to-end scenarios."""

    def test_css_color_declaration(self):
        content, result = transform_text("const css = `.banner { color: #25C9D0; }`;")
        assert content == "const css = `.banner { color: var(--color-olivia-blue); }`;"
        assert result.summary.colors_transformed == 1

    def test_arbitrary_radius_class(self):
        content, result = transform_text('<div className="rounded-[4px]" />')
        assert content == '<div className="rounded-2xs" />'
        assert result.summary.border_radii_transformed == 1
        assert result.summary.classes_transformed == 1

    def test_similar_shadow_declaration(self):
        content, result = transform_text("const css = `.card { box-shadow: 0px 1px 3px 0px rgba(0,0,0,0.11); }`;")
        assert content == "const css = `.card { box-shadow: var(--shadow-outer-extra-light); }`;"
        assert result.summary.shadows_transformed == 1
        replacement = result.file_results[0].replacements[0]
        assert replacement.confidence > 0.7

    def test_unmatched_color_untouched(self):
        catalog = catalog_from_dict({
            "colors": {"base": {"name": "olivia-blue", "alias": "Olivia Blue", "value": "#25C9D0"}},
        })
        source = "const css = `.x { color: #123456; }`;"
        content, result = transform_text(source, catalog=catalog)
        assert content == source
        assert result.summary == TransformationSummary()

    def test_no_presentational_files(self):
        files = [
            make_file("export const c = '#25C9D0';", "src/components/Button/index.ts"),
            make_file(".a { color: #25C9D0; }", "src/components/Button/button.css"),
        ]
        analysis = analyze(files)
        assert analysis.is_empty
        assert analysis.files_analyzed == []

        result = transform(files, analysis=analysis, config=TransformerConfig(max_workers=1))
        assert [f.content for f in result.transformed_files] == [f.content for f in files]
        assert all(r.skipped for r in result.file_results)
        assert result.summary.total == 0


# =============================================================================
# Full component
# =============================================================================

class TestSampleComponent:
    """Test a component touching every category."""

    def test_rewrites(self, sample_component):
        result = transform([sample_component], config=TransformerConfig(max_workers=1))
        content = result.transformed_files[0].content
        assert '<div className="rounded-xs shadow-outer-light bg-olivia-blue p-4">' in content
        assert '<h2 className="text-headline-h1">{title}</h2>' in content
        assert (
            "<p style={{ color: getColorValue('neutral-charcoal'), "
            "borderRadius: getBorderRadiusValue('radius-sm') }}>Body</p>"
        ) in content
        assert "import React from 'react';" in content

    def test_summary(self, sample_component):
        result = transform([sample_component], config=TransformerConfig(max_workers=1))
        assert result.summary.to_dict() == {
            "colors_transformed": 2,
            "border_radii_transformed": 2,
            "shadows_transformed": 1,
            "typography_transformed": 1,
            "classes_transformed": 4,
            "token_imports_transformed": 0,
        }
        assert result.summary.total == 6

    def test_css_var_style_objects(self, sample_component):
        config = TransformerConfig(max_workers=1, style_object_reference="css_var")
        content = transform([sample_component], config=config).transformed_files[0].content
        assert "color: 'var(--color-neutral-charcoal)'" in content
        assert "borderRadius: 'var(--radius-sm)'" in content

    def test_second_pass_changes_nothing(self, sample_component):
        config = TransformerConfig(max_workers=1)
        first = transform([sample_component], config=config)
        second = transform(first.transformed_files, config=config)
        assert second.transformed_files[0].content == first.transformed_files[0].content
        assert second.summary.total == 0

    def test_input_not_mutated(self, sample_component):
        original = sample_component.content
        transform([sample_component], config=TransformerConfig(max_workers=1))
        assert sample_component.content == original

    def test_replacement_details(self, sample_component):
        result = transform([sample_component], config=TransformerConfig(max_workers=1))
        by_original = {r.original: r for r in result.file_results[0].replacements}
        assert by_original["bg-[#25C9D0]"].replacement == "bg-olivia-blue"
        assert by_original["#555555"].replacement == "getColorValue('neutral-charcoal')"
        assert by_original["rounded-[8px]"].token == "radius-xs"
        assert by_original["text-xl font-semibold leading-7"].replacement == "text-headline-h1"


# =============================================================================
# Contexts and counting
# =============================================================================

class TestContexts:
    """Test reference forms per syntax context."""

    def test_color_class_keeps_prefix(self):
        content, _ = transform_text('<p className="text-[#25C9D0] border-[#E52D2D]" />')
        assert content == '<p className="text-olivia-blue border-danger-red" />'

    def test_radius_side_prefix(self):
        content, _ = transform_text('<div className="rounded-t-[12px]" />')
        assert content == '<div className="rounded-t-sm" />'

    def test_default_scale_classes(self):
        content, result = transform_text('<div className="rounded-lg shadow-sm" />')
        assert content == '<div className="rounded-xs shadow-outer-extra-light" />'
        assert result.summary.classes_transformed == 2

    def test_default_scale_disabled(self):
        source = '<div className="rounded-lg shadow-sm" />'
        content, _ = transform_text(source, config=TransformerConfig(max_workers=1, resolve_default_scale=False))
        assert content == source

    def test_alias_variable(self):
        content, result = transform_text("const css = `.a { color: hsl(var(--primary)); }`;")
        assert content == "const css = `.a { color: var(--color-olivia-blue); }`;"
        assert result.summary.colors_transformed == 1

    def test_typography_style_value(self):
        content, _ = transform_text("<p style={{ fontSize: '20px' }} />")
        assert content == "<p style={{ fontSize: getTypographyStyle('text-headline-h1').size.value }} />"

    def test_typography_css_value(self):
        content, _ = transform_text("const css = `.t { font-size: 20px; }`;")
        assert content == "const css = `.t { font-size: var(--text-headline-h1-size); }`;"

    def test_single_typography_class(self):
        content, result = transform_text('<p className="text-xl mt-2" />')
        assert content == '<p className="text-headline-h1 mt-2" />'
        assert result.summary.typography_transformed == 1

    def test_partial_typography_group_keeps_unmatched(self):
        content, _ = transform_text('<p className="text-sm font-semibold leading-9" />')
        token_class = content.split('"')[1].split()
        assert "leading-9" in token_class
        assert len(token_class) == 2

    def test_repeated_typography_class_removed(self):
        content, result = transform_text('<p className="text-sm font-semibold leading-5 text-sm" />')
        assert content == '<p className="text-headline-h3" />'
        assert result.summary.typography_transformed == 1

    def test_repeated_single_typography_class_removed(self):
        content, _ = transform_text('<p className="text-xl mt-2 text-xl" />')
        assert content == '<p className="text-headline-h1 mt-2" />'

    def test_inset_shadow_keeps_inset_token(self):
        content, result = transform_text("const css = `.a { box-shadow: inset 0px 1px 3px 0px rgba(0,0,0,0.1); }`;")
        assert content == "const css = `.a { box-shadow: var(--shadow-inner); }`;"
        assert "outer" not in content
        assert result.summary.shadows_transformed == 1


class TestLeftAlone:
    """Test text that must not change."""

    @pytest.mark.parametrize("source", [
        '<div className="rounded-md shadow-inner" />',
        "const css = `.a { color: var(--color-olivia-blue); }`;",
        '<p className="text-body font-bold" />',
        '<div className="md:rounded-[4px] hover:bg-[#25C9D0]" />',
        '<div className="rounded-full" />',
        "const css = `.a { border-radius: 20px; }`;",
        '<a href="#bad">Skip</a>',
        "const a = 1; // #fed comment",
        "const css = `/* #25C9D0 */ .a { display: block; }`;",
    ])
    def test_unchanged(self, source):
        content, result = transform_text(source)
        assert content == source
        assert result.summary.total == 0


class TestCounting:
    """Test summaries count distinct literals."""

    def test_repeated_literal_counted_once(self):
        source = "const css = `.a { color: #25C9D0; } .b { border-color: #25C9D0; }`;"
        content, result = transform_text(source)
        assert content.count("var(--color-olivia-blue)") == 2
        assert result.summary.colors_transformed == 1
        assert result.file_results[0].replacements[0].occurrences == 2

    def test_summaries_sum_across_files(self):
        files = [
            make_file('<div className="rounded-[4px]" />', "src/A.tsx"),
            make_file('<div className="rounded-[4px] bg-[#25C9D0]" />', "src/B.tsx"),
        ]
        result = transform(files, config=TransformerConfig(max_workers=1))
        assert result.summary.border_radii_transformed == 2
        assert result.summary.colors_transformed == 1
        assert result.summary.classes_transformed == 3

    def test_summary_addition(self):
        total = TransformationSummary(colors_transformed=1) + TransformationSummary(colors_transformed=2, shadows_transformed=1)
        assert total.colors_transformed == 3
        assert total.total == 4


# =============================================================================
# Batch behavior
# =============================================================================

class TestBatch:
    """Test batch-level guarantees."""

    def test_analysis_restricts_rewrites(self):
        source = '<button className="bg-[#25C9D0] rounded-[4px]" />'
        analysis = ComponentAnalysis(colors=["#25C9D0"])
        content, result = transform_text(source, analysis=analysis)
        assert content == '<button className="bg-olivia-blue rounded-[4px]" />'
        assert result.summary.border_radii_transformed == 0

    def test_failure_keeps_original(self, monkeypatch):
        import tokenbridge.transformer as transformer_module

        real = transformer_module.extract_candidates

        def flaky(text):
            if "explode" in text:
                raise RuntimeError("extraction failed")
            return real(text)

        monkeypatch.setattr(transformer_module, "extract_candidates", flaky)
        files = [
            make_file('<div className="rounded-[4px] explode" />', "src/Bad.tsx"),
            make_file('<div className="rounded-[4px]" />', "src/Good.tsx"),
        ]
        result = transform(files, config=TransformerConfig(max_workers=1))

        assert result.transformed_files[0].content == files[0].content
        assert result.transformed_files[1].content == '<div className="rounded-2xs" />'
        assert result.errors == ["Failed to transform src/Bad.tsx: extraction failed"]
        assert result.file_results[0].error is not None
        assert result.summary.border_radii_transformed == 1

    def test_parallel_keeps_input_order(self):
        files = [make_file(f'<div className="rounded-[{n}px]" />', f"src/C{n}.tsx") for n in range(2, 18)]
        result = transform(files, config=TransformerConfig(max_workers=4))
        assert [f.path for f in result.transformed_files] == [f.path for f in files]
        assert [f.path for f in result.original_files] == [f.path for f in files]

    def test_dict_records_accepted(self):
        result = transform(
            [{"name": "A.jsx", "path": "src/A.jsx", "content": '<div className="rounded-[8px]" />'}],
            config=TransformerConfig(max_workers=1),
        )
        assert result.transformed_files[0] == ComponentFile("A.jsx", "src/A.jsx", '<div className="rounded-xs" />')

    def test_custom_extensions(self):
        config = replace(TransformerConfig(max_workers=1), presentational_extensions=(".vue",))
        content, result = transform_text('<div class="rounded-[4px]" />', config=config, path="src/A.vue")
        assert content == '<div class="rounded-2xs" />'

    def test_changed_files(self):
        files = [
            make_file('<div className="rounded-[4px]" />', "src/A.tsx"),
            make_file('<div className="p-2" />', "src/B.tsx"),
        ]
        result = transform(files, config=TransformerConfig(max_workers=1))
        assert [f.path for f in result.changed_files] == ["src/A.tsx"]

    def test_to_dict(self):
        _, result = transform_text('<div className="rounded-[4px]" />')
        data = result.to_dict(include_content=True)
        assert data["summary"]["border_radii_transformed"] == 1
        assert data["files"][0]["replacements"][0]["replacement"] == "rounded-2xs"
        assert data["transformed_files"][0]["content"] == '<div className="rounded-2xs" />'


class TestTransformFile:
    """Test the single-file entry point."""

    def test_skips_non_presentational(self):
        result = transform_file(make_file("#25C9D0", "src/theme.ts"))
        assert result.skipped
        assert not result.changed

    def test_restricted_to_analysis(self, matcher, config):
        result = transform_file(
            make_file('<div className="rounded-[4px] rounded-[8px]" />'),
            matcher=matcher, config=config, analysis=ComponentAnalysis(border_radii=["rounded-[8px]"]),
        )
        assert result.transformed.content == '<div className="rounded-[4px] rounded-xs" />'


class TestDiff:
    """Test unified diff output."""

    def test_generate_diff(self):
        diff = generate_diff("a\nb\n", "a\nc\n", "src/X.tsx")
        assert "--- a/src/X.tsx" in diff
        assert "+++ b/src/X.tsx" in diff
        assert "-b" in diff
        assert "+c" in diff

    def test_no_change_no_diff(self):
        assert generate_diff("same\n", "same\n") == ""

    def test_result_diff(self, sample_component):
        result = transform([sample_component], config=TransformerConfig(max_workers=1))
        diff = result.diff()
        assert "--- a/src/components/Button/Button.tsx" in diff
        assert "+      <h2 className=\"text-headline-h1\">{title}</h2>" in diff


# =============================================================================
# Legacy token imports
# =============================================================================

LEGACY_COLORS = (
    "import { colors } from '../design-system/tokens';\n"
    "const s = { color: colors.oliviaBlue };\n"
)


def transform_with_analysis(content):
    files = [make_file(content)]
    result = transform(files, analysis=analyze(files), config=TransformerConfig(max_workers=1))
    return result.transformed_files[0].content, result


class TestTokenImports:
    """Test legacy token objects become accessor imports."""

    def test_color_member(self):
        content, result = transform_with_analysis(LEGACY_COLORS)
        assert content == (
            "import { getAllColorTokens, getColorToken, getColorValue } from '@tokens/token-index';\n"
            "const s = { color: getColorValue('olivia-blue') };\n"
        )
        assert result.summary.token_imports_transformed == 1
        assert result.summary.total == 1

    def test_radius_and_shadow_members(self):
        source = (
            'import { borderRadius, shadows, spacing } from "@acme/design-system";\n'
            "const s = { borderRadius: borderRadius['2xSmall'].value, boxShadow: shadows.outerTooltip };\n"
        )
        content, _ = transform_with_analysis(source)
        assert content == (
            'import { spacing } from "@acme/design-system";\n'
            "import { getAllBorderRadiusTokens, getBorderRadiusToken, getBorderRadiusValue, "
            'getAllShadowTokens, getShadowToken, getShadowValue } from "@tokens/token-index";\n'
            "const s = { borderRadius: getBorderRadiusValue('radius-2xs'), "
            "boxShadow: getShadowValue('shadow-tooltip') };\n"
        )

    def test_replacement_records(self):
        _, result = transform_with_analysis(LEGACY_COLORS)
        by_category = {r.category: r for r in result.file_results[0].replacements}
        assert by_category["token_import"].token == "@tokens/token-index"
        assert by_category["color"].original == "colors.oliviaBlue"
        assert by_category["color"].token == "olivia-blue"

    @pytest.mark.parametrize("source", [
        "import { colors } from '../design-system/tokens';\nconst c = colors.notAColor;\n",
        "import { colors } from '../design-system/tokens';\nconst all = Object.keys(colors);\n",
        "import { colors } from '../tokens';\nconst c = colors.oliviaBlue;\n",
    ])
    def test_left_alone(self, source):
        content, result = transform_with_analysis(source)
        assert content == source
        assert result.summary.token_imports_transformed == 0

    def test_requires_analysis(self):
        content, result = transform_text(LEGACY_COLORS)
        assert content == LEGACY_COLORS
        assert result.summary.total == 0

    def test_second_pass_changes_nothing(self):
        once, _ = transform_with_analysis(LEGACY_COLORS)
        twice, result = transform_with_analysis(once)
        assert twice == once
        assert result.summary.total == 0

    def test_resolve_legacy_member(self, catalog):
        assert resolve_legacy_member(catalog, "typography", "headlineH1").name == "text-headline-h1"
        assert resolve_legacy_member(catalog, "borderRadius", "small").name == "radius-sm"
        assert resolve_legacy_member(catalog, "shadows", "boxShadowInner").name == "shadow-inner"
        assert resolve_legacy_member(catalog, "colors", "oliviaBlueDark").name == "olivia-blue-dark"
        assert resolve_legacy_member(catalog, "colors", "map") is None

    def test_camel_to_kebab(self):
        assert camel_to_kebab("oliviaBlueT600") == "olivia-blue-t600"
