# storefront/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import ProductOut
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("/", response_model=List[ProductOut])
def list_products(status: str | None = Query(None), db: Session = Depends(get_db)):
    return ProductService(db).list_products(status)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)):
    try:
        return ProductService(db).get_product(product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
