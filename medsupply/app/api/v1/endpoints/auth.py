from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from medsupply.app.api.deps import get_directory
from medsupply.services.auth import authenticate
from medsupply.services.directory import Directory

router = APIRouter()


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


@router.post("/login")
async def login(payload: LoginRequest, directory: Directory = Depends(get_directory)):
    user_id = await authenticate(directory, payload.email, payload.password)
    return {"message": "Login successful", "userId": user_id}
