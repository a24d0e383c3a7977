"""
Tokens router - read-only catalog lookups.
"""

from fastapi import APIRouter, HTTPException

from ...catalog import Token, TypographyToken
from ..models import CategoryName, TokenListResponse, TokenResponse

router = APIRouter()


def get_state():
    from ..main import state
    return state


def token_to_response(token: Token) -> TokenResponse:
    return TokenResponse(
        name=token.name,
        alias=token.alias,
        value=token.value,
        category=token.category.value,
        usage=token.usage,
        css_var=token.css_var(),
        accessor=token.accessor(),
        classes=token.classes if isinstance(token, TypographyToken) else [],
    )


@router.get("/tokens/{category}", response_model=TokenListResponse)
async def list_category(category: CategoryName):
    """All tokens of one category in catalog order."""
    tokens = get_state().get_catalog().list_tokens(category.value)
    return TokenListResponse(
        category=category,
        count=len(tokens),
        tokens=[token_to_response(t) for t in tokens],
    )


@router.get("/tokens/{category}/{name}", response_model=TokenResponse)
async def get_token(category: CategoryName, name: str):
    """Look up a token by name, falling back to its alias."""
    token = get_state().get_catalog().lookup(category.value, name)
    if token is None:
        raise HTTPException(status_code=404, detail=f"No {category.value} token named '{name}'")
    return token_to_response(token)
