# reweara/repositories/catalog_repo.py
import uuid

from sqlalchemy import or_
from sqlmodel import Session, select

from reweara.models.catalog import Brand, Category, Product


class CatalogRepository:
    """
    Data access layer for categories, brands and products.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    # ----- Categories -----

    def list_categories(self, session: Session) -> list[Category]:
        stmt = (
            select(Category)
            .where(Category.is_active == True)
            .order_by(Category.sort_order, Category.name)
        )
        return session.exec(stmt).all()

    def get_category_by_slug(self, session: Session, slug: str) -> Category | None:
        stmt = select(Category).where(Category.slug == slug)
        return session.exec(stmt).first()

    def get_category(self, session: Session, category_id: uuid.UUID) -> Category | None:
        return session.get(Category, category_id)

    # ----- Brands -----

    def list_brands(self, session: Session, featured_only: bool = False) -> list[Brand]:
        stmt = select(Brand).where(Brand.is_active == True)
        if featured_only:
            stmt = stmt.where(Brand.is_featured == True)
        stmt = stmt.order_by(Brand.sort_order, Brand.name)
        return session.exec(stmt).all()

    def get_brand(self, session: Session, brand_id: uuid.UUID) -> Brand | None:
        return session.get(Brand, brand_id)

    # ----- Products -----

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def get_product_by_slug(self, session: Session, slug: str) -> Product | None:
        stmt = select(Product).where(Product.slug == slug)
        return session.exec(stmt).first()

    def list_products(
        self,
        session: Session,
        *,
        category_id: uuid.UUID | None = None,
        brand_id: uuid.UUID | None = None,
        featured: bool = False,
        hot_selling: bool = False,
        search: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> list[Product]:
        stmt = select(Product).where(Product.is_active == True)
        if category_id:
            stmt = stmt.where(Product.category_id == category_id)
        if brand_id:
            stmt = stmt.where(Product.brand_id == brand_id)
        if featured:
            stmt = stmt.where(Product.is_featured == True)
        if hot_selling:
            stmt = stmt.where(Product.is_hot_selling == True)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(Product.name.ilike(pattern), Product.description.ilike(pattern))
            )
        stmt = stmt.order_by(Product.created_at.desc()).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def save_product(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def delete_product(self, session: Session, product: Product) -> None:
        session.delete(product)
        session.commit()
