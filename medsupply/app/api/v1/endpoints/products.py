from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from medsupply.app.api.deps import get_directory
from medsupply.services.directory import Directory

router = APIRouter(prefix="/products")


class ProductCreate(BaseModel):
    productName: str | None = Field(default=None, max_length=255)


@router.get("")
async def list_products(directory: Directory = Depends(get_directory)):
    return await directory.list_products()


@router.post("", status_code=201)
async def create_product(payload: ProductCreate, directory: Directory = Depends(get_directory)):
    product = await directory.create_product(payload.productName)
    return {"message": "Medicine created successfully.", "product": product}
