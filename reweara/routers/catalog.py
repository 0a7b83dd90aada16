# reweara/routers/catalog.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from reweara.core.auth import require_admin
from reweara.database import get_session
from reweara.repositories.catalog_repo import CatalogRepository
from reweara.schemas.catalog import (
    BrandRead,
    CategoryRead,
    ProductCreate,
    ProductRead,
    ProductUpdate,
)
from reweara.services.catalog_service import CatalogService

router = APIRouter(tags=["Catalog"])

repo = CatalogRepository()
service = CatalogService(repo)


# -------- Public endpoints --------


@router.get("/categories", response_model=list[CategoryRead])
def list_categories(session: Session = Depends(get_session)):
    """
    List active categories ordered by sort_order.
    """
    return service.list_categories(session)


@router.get("/categories/{slug}", response_model=CategoryRead)
def get_category(slug: str, session: Session = Depends(get_session)):
    return service.get_category(session, slug)


@router.get("/brands", response_model=list[BrandRead])
def list_brands(session: Session = Depends(get_session)):
    return service.list_brands(session)


@router.get("/brands/featured", response_model=list[BrandRead])
def list_featured_brands(session: Session = Depends(get_session)):
    return service.list_brands(session, featured_only=True)


@router.get("/products", response_model=list[ProductRead])
def list_products(
    session: Session = Depends(get_session),
    category: uuid.UUID | None = None,
    brand: uuid.UUID | None = None,
    featured: bool = False,
    hot_selling: bool = False,
    search: str | None = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
):
    """
    List active products.

    Filters combine with AND; `search` matches name or description.
    """
    return service.list_products(
        session,
        category_id=category,
        brand_id=brand,
        featured=featured,
        hot_selling=hot_selling,
        search=search,
        skip=skip,
        limit=limit,
    )


@router.get("/products/{product_id}", response_model=ProductRead)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Product detail page; counts as a view.
    """
    return service.view_product(session, product_id)


# -------- Admin endpoints --------


@router.post(
    "/admin/products",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    return service.create_product(session, payload)


@router.patch(
    "/admin/products/{product_id}",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    return service.update_product(session, product_id, payload)


@router.delete(
    "/admin/products/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    service.delete_product(session, product_id)
