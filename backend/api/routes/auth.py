"""Sign in, current user, sign out."""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.deps import StoreDep, bearer_token, require_user
from api.helpers import public_user
from schemas.requests import SignIn
from services.auth import authenticate, sign_out

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/sign-in")
async def sign_in(body: SignIn, db: StoreDep):
    user, session = authenticate(body.email, body.password, db)
    return JSONResponse({
        "user": public_user(user),
        "token": session.token,
        "createdAt": session.created_at,
    })


@router.get("/me")
async def me(user: Annotated[dict, Depends(require_user)]):
    return JSONResponse(public_user(user))


@router.post("/sign-out")
async def sign_out_route(token: Annotated[Optional[str], Depends(bearer_token)]):
    if token:
        sign_out(token)
    return JSONResponse({"ok": True})
