"""Design token catalog and transformer that rewrites hardcoded styles into token references."""

__version__ = "0.1.0"

from .catalog import (  # noqa: E402
    CatalogError,
    Token,
    TokenCatalog,
    TokenCategory,
    TokenNotFoundError,
    get_default_catalog,
    list_tokens,
    load_catalog,
    lookup_token,
)
from .analyzer import ComponentAnalysis, analyze  # noqa: E402
from .config import ConfigError, TransformerConfig, load_config  # noqa: E402
from .files import ComponentFile  # noqa: E402
from .transformer import TransformationResult, TransformationSummary, transform  # noqa: E402

__all__ = [
    "__version__",
    "CatalogError",
    "ComponentAnalysis",
    "ComponentFile",
    "ConfigError",
    "Token",
    "TokenCatalog",
    "TokenCategory",
    "TokenNotFoundError",
    "TransformationResult",
    "TransformationSummary",
    "TransformerConfig",
    "analyze",
    "get_default_catalog",
    "list_tokens",
    "load_catalog",
    "load_config",
    "lookup_token",
    "transform",
]
