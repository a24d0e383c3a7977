"""
Style system configuration generated from the catalog.

The transformer writes token utility classes (``rounded-xs``,
``shadow-outer-light``, ``text-headline-h1``) and custom properties
(``var(--color-olivia-blue)``). These only resolve when the consuming project
declares them, so this module emits the matching Tailwind theme extension,
a safelist, and a ``:root`` block of CSS custom properties.
"""

import json
from typing import Any, Dict, List, Optional

from .catalog import TokenCatalog, TokenCategory, TypographyToken, get_default_catalog

COLOR_CLASS_PREFIXES = ("bg", "text", "border")
DEFAULT_CONTENT_GLOBS = ["./src/**/*.{js,ts,jsx,tsx}"]


def _font_size_entry(token: TypographyToken) -> List[Any]:
    options: Dict[str, str] = {"fontWeight": token.weight.value}
    if token.line_height is not None:
        options["lineHeight"] = token.line_height.value
    return [token.size.value, options]


def generate_safelist(catalog: Optional[TokenCatalog] = None) -> List[str]:
    """Every token utility class, in catalog order."""
    catalog = catalog or get_default_catalog()
    safelist: List[str] = []
    for prefix in COLOR_CLASS_PREFIXES:
        safelist.extend(t.utility_class(prefix) for t in catalog.list_tokens(TokenCategory.COLOR))
    safelist.extend(t.utility_class() for t in catalog.list_tokens(TokenCategory.BORDER_RADIUS))
    safelist.extend(t.utility_class() for t in catalog.list_tokens(TokenCategory.SHADOW))
    safelist.extend(t.name for t in catalog.list_tokens(TokenCategory.TYPOGRAPHY))
    return safelist


def generate_tailwind_config(
    catalog: Optional[TokenCatalog] = None,
    content: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    Tailwind configuration as a plain dict.

    ``fontSize`` keys drop the ``text-`` prefix so that Tailwind generates
    the typography token names themselves as classes.
    """
    catalog = catalog or get_default_catalog()
    style_map = catalog.to_style_map()

    font_size = {}
    for token in catalog.list_tokens(TokenCategory.TYPOGRAPHY):
        key = token.name[len("text-"):] if token.name.startswith("text-") else token.name
        font_size[key] = _font_size_entry(token)

    extend: Dict[str, Any] = {
        "colors": style_map["colors"],
        "borderRadius": style_map["borderRadius"],
        "boxShadow": style_map["boxShadow"],
        "fontSize": font_size,
    }
    if catalog.font_family is not None:
        extend["fontFamily"] = {
            "sans": [catalog.font_family.value, "ui-sans-serif", "system-ui", "sans-serif"],
        }

    return {
        "content": list(content or DEFAULT_CONTENT_GLOBS),
        "theme": {"extend": extend},
        "safelist": generate_safelist(catalog),
        "plugins": [],
    }


def render_tailwind_config(catalog: Optional[TokenCatalog] = None) -> str:
    """``tailwind.config.js`` source text."""
    config = generate_tailwind_config(catalog)
    body = json.dumps(config, indent=2)
    return "/** @type {import('tailwindcss').Config} */\nmodule.exports = " + body + ";\n"


def css_variable_map(catalog: Optional[TokenCatalog] = None) -> Dict[str, str]:
    """Custom property name -> value, colors first, then radius, shadow, typography."""
    catalog = catalog or get_default_catalog()
    variables: Dict[str, str] = {}
    for category in (TokenCategory.COLOR, TokenCategory.BORDER_RADIUS, TokenCategory.SHADOW):
        for token in catalog.list_tokens(category):
            variables[token.custom_property] = token.value

    for token in catalog.list_tokens(TokenCategory.TYPOGRAPHY):
        for key in ("size", "weight", "line_height"):
            dimension = token.dimension(key)
            if dimension is not None:
                variables[f"{token.custom_property}-{key.replace('_', '-')}"] = dimension.value
    return variables


def generate_css_variables(catalog: Optional[TokenCatalog] = None, tailwind_directives: bool = False) -> str:
    """``:root`` block declaring every token custom property."""
    lines = []
    if tailwind_directives:
        lines += ["@tailwind base;", "@tailwind components;", "@tailwind utilities;", ""]
    lines.append(":root {")
    lines.append("  /* Generated from design tokens */")
    for name, value in css_variable_map(catalog).items():
        lines.append(f"  {name}: {value};")
    lines.append("}")
    return "\n".join(lines) + "\n"
