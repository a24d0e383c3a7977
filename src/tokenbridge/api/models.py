"""
tokenbridge REST API - Pydantic Models

Request bodies carry component files inline; responses mirror the library's
``to_dict()`` shapes.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class CategoryName(str, Enum):
    color = "color"
    border_radius = "border_radius"
    shadow = "shadow"
    typography = "typography"


class StyleObjectReference(str, Enum):
    accessor = "accessor"
    css_var = "css_var"


# =============================================================================
# Tokens
# =============================================================================

class TokenResponse(BaseModel):
    """One catalog token with its reference forms."""
    name: str
    alias: str
    value: str
    category: CategoryName
    usage: Optional[str] = None
    css_var: str
    accessor: str
    classes: list[str] = Field(default_factory=list, description="Utility classes of a text style")


class TokenListResponse(BaseModel):
    category: CategoryName
    count: int
    tokens: list[TokenResponse]


# =============================================================================
# Files
# =============================================================================

class FileModel(BaseModel):
    """A component source file."""
    name: str = Field(..., min_length=1)
    path: str = Field(..., min_length=1)
    content: str


# =============================================================================
# Analyze
# =============================================================================

class AnalyzeRequest(BaseModel):
    files: list[FileModel] = Field(..., description="Component files to scan")


class TokenImportModel(BaseModel):
    source: str
    tokens: list[str]


class AnalysisResponse(BaseModel):
    colors: list[str] = Field(default_factory=list)
    rgba_colors: list[str] = Field(default_factory=list)
    color_classes: list[str] = Field(default_factory=list)
    border_radii: list[str] = Field(default_factory=list)
    shadows: list[str] = Field(default_factory=list)
    typography: list[str] = Field(default_factory=list)
    variable_references: list[str] = Field(default_factory=list)
    tailwind_classes: list[str] = Field(default_factory=list)
    token_imports: list[TokenImportModel] = Field(default_factory=list)
    files_analyzed: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


# =============================================================================
# Transform
# =============================================================================

class TransformRequest(BaseModel):
    files: list[FileModel] = Field(..., description="Component files to rewrite")
    analysis: Optional[AnalysisResponse] = Field(
        default=None, description="Prior analysis; restricts rewrites and drives token import rewrites"
    )
    style_object_reference: Optional[StyleObjectReference] = Field(
        default=None, description="Override the configured style-object reference form"
    )
    include_diff: bool = Field(default=False)


class SummaryModel(BaseModel):
    colors_transformed: int = 0
    border_radii_transformed: int = 0
    shadows_transformed: int = 0
    typography_transformed: int = 0
    classes_transformed: int = 0
    token_imports_transformed: int = 0


class FileResultModel(BaseModel):
    path: str
    changed: bool
    skipped: bool
    error: Optional[str] = None
    summary: SummaryModel
    replacements: list[dict[str, Any]] = Field(default_factory=list)


class TransformResponse(BaseModel):
    summary: SummaryModel
    files: list[FileModel]
    results: list[FileResultModel]
    errors: list[str] = Field(default_factory=list)
    diff: Optional[str] = None
