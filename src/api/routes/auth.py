"""
Session routes.

Sign-in happens with the hosted identity provider; these endpoints only
read and end the session it created.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from src.api.deps import get_auth_provider, get_current_user, oauth2_scheme
from src.domain.entities import User

router = APIRouter()


@router.get("/me", response_model=User)
def read_current_user(current_user: User = Depends(get_current_user)) -> User:
    return current_user


@router.post("/logout")
def logout(
    request: Request,
    response: Response,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    auth=Depends(get_auth_provider),
) -> dict[str, str]:
    """Clear the session cookie and forget the token."""
    cookie_token = request.cookies.get("access_token")
    if cookie_token and cookie_token.startswith("Bearer "):
        token = cookie_token.split(" ", 1)[1]
    if token and hasattr(auth, "sign_out"):
        auth.sign_out(token)
    response.delete_cookie(key="access_token")
    return {"status": "success"}
