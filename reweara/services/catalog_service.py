# reweara/services/catalog_service.py
import logging
import re
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from reweara.models.catalog import Brand, Category, Product
from reweara.repositories.catalog_repo import CatalogRepository
from reweara.schemas.catalog import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Business logic for the catalog.

    Responsibilities:
      - storefront browsing (filters, view counting)
      - slug generation & uniqueness
      - referential checks on category / brand
      - admin-only operations (enforced at router via require_admin)
    """

    def __init__(self, repo: CatalogRepository):
        self.repo = repo

    # ----- Helpers -----

    @staticmethod
    def _slugify(raw: str) -> str:
        """
        Basic slugification:
          - lowercase
          - non-alphanumeric -> '-'
          - collapse multiple '-'
          - strip leading/trailing '-'
        """
        value = raw.strip().lower()
        value = re.sub(r"[^a-z0-9]+", "-", value)
        value = re.sub(r"-+", "-", value)
        value = value.strip("-")
        return value or "product"

    def _ensure_unique_slug(self, session: Session, base_slug: str) -> str:
        """
        Ensure slug is unique by appending -2, -3, ... if needed.
        """
        slug = base_slug
        i = 2
        while self.repo.get_product_by_slug(session, slug) is not None:
            slug = f"{base_slug}-{i}"
            i += 1
        return slug

    def _check_refs(
        self,
        session: Session,
        category_id: uuid.UUID | None,
        brand_id: uuid.UUID | None,
    ) -> None:
        if category_id is not None and self.repo.get_category(session, category_id) is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Unknown category",
            )
        if brand_id is not None and self.repo.get_brand(session, brand_id) is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Unknown brand",
            )

    # ----- Categories / brands -----

    def list_categories(self, session: Session) -> list[Category]:
        return self.repo.list_categories(session)

    def get_category(self, session: Session, slug: str) -> Category:
        category = self.repo.get_category_by_slug(session, slug)
        if not category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Category not found",
            )
        return category

    def list_brands(self, session: Session, featured_only: bool = False) -> list[Brand]:
        return self.repo.list_brands(session, featured_only=featured_only)

    # ----- Products -----

    def list_products(self, session: Session, **filters) -> list[Product]:
        return self.repo.list_products(session, **filters)

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_product(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def view_product(self, session: Session, product_id: uuid.UUID) -> Product:
        """
        Storefront product detail: inactive products are hidden and every
        view bumps view_count.
        """
        product = self.get_product(session, product_id)
        if not product.is_active:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        product.view_count += 1
        return self.repo.save_product(session, product)

    def create_product(self, session: Session, payload: ProductCreate) -> Product:
        """
        Create a new product with a unique slug (derived from name if omitted).
        """
        self._check_refs(session, payload.category_id, payload.brand_id)

        data = payload.model_dump(exclude={"slug"})
        slug = self._ensure_unique_slug(session, self._slugify(payload.slug or payload.name))

        product = self.repo.save_product(session, Product(slug=slug, **data))
        logger.info("Created product %s (%s)", product.id, product.slug)
        return product

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> Product:
        product = self.get_product(session, product_id)
        changes = payload.model_dump(exclude_unset=True)
        self._check_refs(session, changes.get("category_id"), changes.get("brand_id"))

        for key, value in changes.items():
            setattr(product, key, value)
        return self.repo.save_product(session, product)

    def delete_product(self, session: Session, product_id: uuid.UUID) -> None:
        product = self.get_product(session, product_id)
        self.repo.delete_product(session, product)
        logger.info("Deleted product %s", product_id)
