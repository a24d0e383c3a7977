"""
Design token catalog.

Tokens are declared in a nested YAML document (grouped the way designers think
about them) and flattened once at load time into one ordered table per
category. Each table keeps two indices, by canonical name and by designer
alias, and refuses duplicates in either.

The catalog is read-only after load. A process-wide default instance is built
lazily from the bundled ``data/tokens.yaml``.

Usage:
    from tokenbridge.catalog import get_default_catalog, TokenCategory

    catalog = get_default_catalog()
    token = catalog.lookup(TokenCategory.COLOR, "Olivia Blue")
    token.css_var()   # "var(--color-olivia-blue)"
"""

import logging
from dataclasses import dataclass, asdict
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar, Dict, Iterator, List, Optional, Union

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "tokens.yaml"


class CatalogError(ValueError):
    """Catalog document is malformed or violates uniqueness."""


class TokenNotFoundError(LookupError):
    """Raised by accessor-style lookups when a token does not exist."""

    def __init__(self, category: str, query: str):
        self.category = category
        self.query = query
        super().__init__(f"No {category} token named '{query}'")


class TokenCategory(Enum):
    COLOR = "color"
    BORDER_RADIUS = "border_radius"
    SHADOW = "shadow"
    TYPOGRAPHY = "typography"

    @classmethod
    def parse(cls, value: Union[str, "TokenCategory"]) -> "TokenCategory":
        """Accept the enum itself or any of the common spellings."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("-", "_")
        category = _CATEGORY_SPELLINGS.get(key)
        if category is None:
            raise CatalogError(f"Unknown token category: {value}")
        return category


_CATEGORY_SPELLINGS = {
    "color": TokenCategory.COLOR,
    "colors": TokenCategory.COLOR,
    "border_radius": TokenCategory.BORDER_RADIUS,
    "borderradius": TokenCategory.BORDER_RADIUS,
    "radius": TokenCategory.BORDER_RADIUS,
    "radii": TokenCategory.BORDER_RADIUS,
    "shadow": TokenCategory.SHADOW,
    "shadows": TokenCategory.SHADOW,
    "boxshadow": TokenCategory.SHADOW,
    "typography": TokenCategory.TYPOGRAPHY,
    "text": TokenCategory.TYPOGRAPHY,
}


# === TOKENS ===

@dataclass(frozen=True)
class Token:
    """A catalog entry. Subclasses fix the category and reference formats."""
    name: str
    alias: str
    value: str
    usage: Optional[str] = None

    CATEGORY: ClassVar[TokenCategory]
    VAR_PREFIX: ClassVar[str] = ""
    NAME_PREFIX: ClassVar[str] = ""
    ACCESSOR: ClassVar[str] = ""

    @property
    def category(self) -> TokenCategory:
        return self.CATEGORY

    @property
    def suffix(self) -> str:
        """Name without its category prefix (``radius-xs`` -> ``xs``)."""
        if self.NAME_PREFIX and self.name.startswith(self.NAME_PREFIX):
            return self.name[len(self.NAME_PREFIX):]
        return self.name

    @property
    def custom_property(self) -> str:
        return f"--{self.VAR_PREFIX}{self.suffix}"

    def css_var(self) -> str:
        return f"var({self.custom_property})"

    def accessor(self) -> str:
        return f"{self.ACCESSOR}('{self.name}')"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["category"] = self.CATEGORY.value
        return data


@dataclass(frozen=True)
class ColorToken(Token):
    CATEGORY: ClassVar[TokenCategory] = TokenCategory.COLOR
    VAR_PREFIX: ClassVar[str] = "color-"
    ACCESSOR: ClassVar[str] = "getColorValue"

    @property
    def suffix(self) -> str:
        return self.name

    def utility_class(self, prefix: str = "bg") -> str:
        return f"{prefix}-{self.name}"


@dataclass(frozen=True)
class BorderRadiusToken(Token):
    CATEGORY: ClassVar[TokenCategory] = TokenCategory.BORDER_RADIUS
    VAR_PREFIX: ClassVar[str] = "radius-"
    NAME_PREFIX: ClassVar[str] = "radius-"
    ACCESSOR: ClassVar[str] = "getBorderRadiusValue"

    def utility_class(self, prefix: str = "rounded") -> str:
        return f"{prefix}-{self.suffix}"


@dataclass(frozen=True)
class ShadowToken(Token):
    CATEGORY: ClassVar[TokenCategory] = TokenCategory.SHADOW
    VAR_PREFIX: ClassVar[str] = "shadow-"
    NAME_PREFIX: ClassVar[str] = "shadow-"
    ACCESSOR: ClassVar[str] = "getShadowValue"

    @property
    def inset(self) -> bool:
        return "inset" in self.value.lower().split()

    def utility_class(self, prefix: str = "shadow") -> str:
        return f"{prefix}-{self.suffix}"


@dataclass(frozen=True)
class TypographyValue:
    """One dimension of a text style: its CSS value and utility class."""
    value: str
    utility_class: str


@dataclass(frozen=True)
class TypographyToken(Token):
    size: Optional[TypographyValue] = None
    weight: Optional[TypographyValue] = None
    line_height: Optional[TypographyValue] = None

    CATEGORY: ClassVar[TokenCategory] = TokenCategory.TYPOGRAPHY
    ACCESSOR: ClassVar[str] = "getTypographyStyle"

    @property
    def custom_property(self) -> str:
        return f"--{self.name}"

    def dimension(self, key: str) -> Optional[TypographyValue]:
        return getattr(self, key)

    def dimension_var(self, key: str) -> str:
        return f"var(--{self.name}-{key.replace('_', '-')})"

    def dimension_accessor(self, key: str) -> str:
        attr = {"size": "size", "weight": "weight", "line_height": "lineHeight"}[key]
        return f"{self.accessor()}.{attr}.value"

    def utility_class(self, prefix: str = "") -> str:
        return self.name

    @property
    def classes(self) -> List[str]:
        return [d.utility_class for d in (self.size, self.weight, self.line_height) if d]


TOKEN_TYPES = {
    TokenCategory.COLOR: ColorToken,
    TokenCategory.BORDER_RADIUS: BorderRadiusToken,
    TokenCategory.SHADOW: ShadowToken,
    TokenCategory.TYPOGRAPHY: TypographyToken,
}


# === INDEX ===

class CategoryIndex:
    """Ordered token table for one category with name and alias indices."""

    def __init__(self, category: TokenCategory, tokens: List[Token]):
        self.category = category
        self._tokens: List[Token] = []
        self._by_name: Dict[str, Token] = {}
        self._by_alias: Dict[str, Token] = {}

        for token in tokens:
            if token.name in self._by_name:
                raise CatalogError(
                    f"Duplicate {category.value} token name: {token.name}"
                )
            if token.alias in self._by_alias:
                raise CatalogError(
                    f"Duplicate {category.value} token alias: {token.alias}"
                )
            self._by_name[token.name] = token
            self._by_alias[token.alias] = token
            self._tokens.append(token)

    def get_by_name(self, name: str) -> Optional[Token]:
        return self._by_name.get(name)

    def get_by_alias(self, alias: str) -> Optional[Token]:
        return self._by_alias.get(alias)

    def get_by_either(self, name_or_alias: str) -> Optional[Token]:
        """Name first, then alias."""
        token = self._by_name.get(name_or_alias)
        if token is None:
            token = self._by_alias.get(name_or_alias)
        return token

    def get_all(self) -> List[Token]:
        return list(self._tokens)

    def names(self) -> List[str]:
        return [t.name for t in self._tokens]

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __contains__(self, name: str) -> bool:
        return name in self._by_name


# === CATALOG ===

class TokenCatalog:
    """Read-only collection of the four token categories."""

    def __init__(
        self,
        colors: List[Token],
        border_radii: List[Token],
        shadows: List[Token],
        typography: List[Token],
        font_family: Optional[Token] = None,
        semantic_aliases: Optional[Dict[str, Dict[str, str]]] = None,
        class_aliases: Optional[Dict[str, Dict[str, str]]] = None,
    ):
        self._indices = {
            TokenCategory.COLOR: CategoryIndex(TokenCategory.COLOR, colors),
            TokenCategory.BORDER_RADIUS: CategoryIndex(TokenCategory.BORDER_RADIUS, border_radii),
            TokenCategory.SHADOW: CategoryIndex(TokenCategory.SHADOW, shadows),
            TokenCategory.TYPOGRAPHY: CategoryIndex(TokenCategory.TYPOGRAPHY, typography),
        }
        self.font_family = font_family
        self._semantic_aliases = _parse_alias_table(semantic_aliases or {})
        self._class_aliases = _parse_alias_table(class_aliases or {})

        for category, table in self._semantic_aliases.items():
            index = self._indices[category]
            for alias, target in table.items():
                if target not in index:
                    raise CatalogError(
                        f"Semantic alias '{alias}' points to unknown {category.value} token '{target}'"
                    )

    def index(self, category: Union[str, TokenCategory]) -> CategoryIndex:
        return self._indices[TokenCategory.parse(category)]

    def lookup(self, category: Union[str, TokenCategory], name_or_alias: str) -> Optional[Token]:
        return self.index(category).get_by_either(name_or_alias)

    def require(self, category: Union[str, TokenCategory], name_or_alias: str) -> Token:
        token = self.lookup(category, name_or_alias)
        if token is None:
            raise TokenNotFoundError(TokenCategory.parse(category).value, name_or_alias)
        return token

    def list_tokens(self, category: Union[str, TokenCategory]) -> List[Token]:
        return self.index(category).get_all()

    def get_value(self, category: Union[str, TokenCategory], name_or_alias: str) -> str:
        return self.require(category, name_or_alias).value

    def text_style_classes(self, name_or_alias: str) -> str:
        token = self.require(TokenCategory.TYPOGRAPHY, name_or_alias)
        return " ".join(token.classes)

    def resolve_alias(
        self, name: str, category: Optional[TokenCategory] = None
    ) -> Optional[Token]:
        """Resolve an alternate variable name (``primary``) to its token."""
        categories = [category] if category else list(self._semantic_aliases)
        for cat in categories:
            target = self._semantic_aliases.get(cat, {}).get(name)
            if target:
                return self._indices[cat].get_by_name(target)
        return None

    def class_alias(self, class_name: str, category: TokenCategory) -> Optional[Token]:
        target = self._class_aliases.get(category, {}).get(class_name)
        if target is None:
            return None
        return self._indices[category].get_by_name(target)

    def semantic_aliases(self, category: TokenCategory) -> Dict[str, str]:
        return dict(self._semantic_aliases.get(category, {}))

    def to_style_map(self) -> Dict[str, Dict[str, str]]:
        """Category -> {key: value} for style system configuration."""
        return {
            "colors": {t.name: t.value for t in self.index(TokenCategory.COLOR)},
            "borderRadius": {t.suffix: t.value for t in self.index(TokenCategory.BORDER_RADIUS)},
            "boxShadow": {t.suffix: t.value for t in self.index(TokenCategory.SHADOW)},
            "typography": {t.name: t.value for t in self.index(TokenCategory.TYPOGRAPHY)},
        }

    def stats(self) -> Dict[str, int]:
        return {category.value: len(index) for category, index in self._indices.items()}


def _parse_alias_table(raw: Dict[str, Dict[str, str]]) -> Dict[TokenCategory, Dict[str, str]]:
    table: Dict[TokenCategory, Dict[str, str]] = {}
    for category_key, entries in raw.items():
        if not isinstance(entries, dict):
            raise CatalogError(f"Alias table for '{category_key}' must be a mapping")
        table[TokenCategory.parse(category_key)] = {str(k): str(v) for k, v in entries.items()}
    return table


# === LOADING ===

def _is_leaf(node: Any) -> bool:
    return isinstance(node, dict) and "name" in node


def _flatten(node: Any, path: str = "") -> List[Dict[str, Any]]:
    """Walk nested groups and collect leaf entries in declaration order."""
    if _is_leaf(node):
        return [node]
    if not isinstance(node, dict):
        raise CatalogError(f"Unexpected value at '{path}': expected a group or token")
    leaves = []
    for key, child in node.items():
        leaves.extend(_flatten(child, f"{path}.{key}" if path else str(key)))
    return leaves


def _typography_value(entry: Dict[str, Any], key: str) -> Optional[TypographyValue]:
    raw = entry.get(key)
    if raw is None:
        return None
    if "value" not in raw or "class" not in raw:
        raise CatalogError(f"Typography '{entry['name']}' {key} needs 'value' and 'class'")
    return TypographyValue(value=str(raw["value"]), utility_class=str(raw["class"]))


def _build_token(category: TokenCategory, entry: Dict[str, Any]) -> Token:
    name = str(entry["name"])
    alias = str(entry.get("alias") or name)
    usage = entry.get("usage")

    if category is TokenCategory.TYPOGRAPHY:
        size = _typography_value(entry, "size")
        weight = _typography_value(entry, "weight")
        if size is None or weight is None:
            raise CatalogError(f"Typography '{name}' must define size and weight")
        line_height = _typography_value(entry, "line_height")
        classes = " ".join(d.utility_class for d in (size, weight, line_height) if d)
        return TypographyToken(
            name=name, alias=alias, value=classes, usage=usage,
            size=size, weight=weight, line_height=line_height,
        )

    if "value" not in entry:
        raise CatalogError(f"{category.value} token '{name}' has no value")
    value = str(entry["value"]).strip()
    if category is TokenCategory.COLOR:
        value = value.upper()
    return TOKEN_TYPES[category](name=name, alias=alias, value=value, usage=usage)


def catalog_from_dict(data: Dict[str, Any]) -> TokenCatalog:
    """Build a catalog from an already-parsed document."""
    if not isinstance(data, dict):
        raise CatalogError("Catalog document must be a mapping")

    sections = {
        TokenCategory.COLOR: data.get("colors") or {},
        TokenCategory.BORDER_RADIUS: data.get("border_radius") or {},
        TokenCategory.SHADOW: data.get("shadows") or {},
        TokenCategory.TYPOGRAPHY: dict(data.get("typography") or {}),
    }

    font_family = None
    family = sections[TokenCategory.TYPOGRAPHY].pop("font_family", None)
    if family:
        font_family = Token(
            name=str(family["name"]),
            alias=str(family.get("alias") or family["name"]),
            value=str(family["value"]),
        )

    tokens: Dict[TokenCategory, List[Token]] = {}
    for category, section in sections.items():
        tokens[category] = [_build_token(category, leaf) for leaf in _flatten(section, category.value)]

    return TokenCatalog(
        colors=tokens[TokenCategory.COLOR],
        border_radii=tokens[TokenCategory.BORDER_RADIUS],
        shadows=tokens[TokenCategory.SHADOW],
        typography=tokens[TokenCategory.TYPOGRAPHY],
        font_family=font_family,
        semantic_aliases=data.get("semantic_aliases"),
        class_aliases=data.get("class_aliases"),
    )


def load_catalog(path: Optional[Union[str, Path]] = None) -> TokenCatalog:
    """Load and validate a catalog YAML file (bundled catalog by default)."""
    catalog_path = Path(path) if path else DEFAULT_CATALOG_PATH
    try:
        with open(catalog_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise CatalogError(f"Cannot read catalog {catalog_path}: {e}") from e
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid YAML in {catalog_path}: {e}") from e

    catalog = catalog_from_dict(data)
    logger.debug(f"Loaded catalog from {catalog_path}: {catalog.stats()}")
    return catalog


_default_catalog: Optional[TokenCatalog] = None


def get_default_catalog() -> TokenCatalog:
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = load_catalog()
    return _default_catalog


# === ACCESSORS ===
# Python counterparts of the accessor calls written into transformed code.

def lookup_token(
    category: Union[str, TokenCategory],
    name_or_alias: str,
    catalog: Optional[TokenCatalog] = None,
) -> Optional[Token]:
    return (catalog or get_default_catalog()).lookup(category, name_or_alias)


def list_tokens(
    category: Union[str, TokenCategory], catalog: Optional[TokenCatalog] = None
) -> List[Token]:
    return (catalog or get_default_catalog()).list_tokens(category)


def get_color_value(name_or_alias: str) -> str:
    return get_default_catalog().get_value(TokenCategory.COLOR, name_or_alias)


def get_border_radius_value(name_or_alias: str) -> str:
    return get_default_catalog().get_value(TokenCategory.BORDER_RADIUS, name_or_alias)


def get_shadow_value(name_or_alias: str) -> str:
    return get_default_catalog().get_value(TokenCategory.SHADOW, name_or_alias)


def get_typography_style(name_or_alias: str) -> TypographyToken:
    return get_default_catalog().require(TokenCategory.TYPOGRAPHY, name_or_alias)


def get_text_style_classes(name_or_alias: str) -> str:
    return get_default_catalog().text_style_classes(name_or_alias)
