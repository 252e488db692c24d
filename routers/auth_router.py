# routers/auth_router.py
from fastapi import APIRouter
from models.auth import Credentials, TokenResponse
from services.auth_service import login, register_user

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", status_code=201)
async def api_register(credentials: Credentials):
    return await register_user(credentials)

@router.post("/login", response_model=TokenResponse)
async def api_login(credentials: Credentials):
    return await login(credentials)
