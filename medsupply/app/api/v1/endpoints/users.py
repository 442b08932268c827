from __future__ import annotations

from fastapi import APIRouter, Depends

from medsupply.app.api.deps import get_directory
from medsupply.services.directory import Directory

router = APIRouter(prefix="/users")


@router.get("")
async def list_users(directory: Directory = Depends(get_directory)):
    return await directory.list_users()
