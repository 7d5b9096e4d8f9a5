from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request, Response, status

from notetaker.api.body import json_body
from notetaker.models.auth import RegisterResponse, TokenResponse, UserOut
from notetaker.services.accounts import AccountService
from notetaker.utils.identity import SESSION_COOKIE

router = APIRouter(tags=["auth"])


def get_account_service(request: Request) -> AccountService:
    return request.app.state.account_service


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(payload: Any = Depends(json_body), accounts: AccountService = Depends(get_account_service)):
    rec = accounts.register(payload)
    return RegisterResponse(user=UserOut(id=rec.user_id, email=rec.email, name=rec.name))


@router.post("/login", response_model=TokenResponse)
def login(
    response: Response,
    payload: Any = Depends(json_body),
    accounts: AccountService = Depends(get_account_service),
):
    token = accounts.authenticate(payload)
    # browser clients ride on the cookie, API clients on the bearer token
    response.set_cookie(
        SESSION_COOKIE,
        token,
        max_age=accounts.tokens.max_age_seconds,
        httponly=True,
        samesite="lax",
    )
    return TokenResponse(access_token=token)
