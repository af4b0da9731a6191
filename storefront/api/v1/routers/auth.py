from fastapi import APIRouter, Depends, HTTPException, Response

from storefront.api.deps import user_repo_dep, user_repo_optional
from storefront.api.v1.schemas.auth import AuthOut, CreateUserIn, LoginIn
from storefront.domain.repositories.user_repo import UserExists
from storefront.domain.services.auth_svc import InvalidCredentials, authenticate, register

import logging
logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

INVALID_CREDENTIALS = "Invalid credentials"


@router.post("/login", response_model=AuthOut)
@router.post("/auth/login", response_model=AuthOut, include_in_schema=False)
async def login(
    body: LoginIn,
    response: Response,
    users = Depends(user_repo_optional),
):
    response.headers["Cache-Control"] = "no-store"
    email = body.email.strip().lower()
    if not email or not body.password:
        raise HTTPException(status_code=400, detail="Missing email or password")
    try:
        user = await authenticate(users, email, body.password)
    except InvalidCredentials:
        raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)
    return AuthOut(user=user)


@router.post("/auth/create-user", response_model=AuthOut, status_code=201)
async def create_user(
    body: CreateUserIn,
    users = Depends(user_repo_dep),
):
    if not body.name.strip() or not body.email.strip() or not body.password:
        raise HTTPException(status_code=400, detail="Missing fields")
    try:
        user = await register(users, body.name, body.email, body.password, role=body.role or "user")
    except UserExists:
        raise HTTPException(status_code=409, detail="Email already registered")
    return AuthOut(user=user)
