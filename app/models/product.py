import uuid
from sqlalchemy import UUID, Boolean, CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint, event
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from app.core.errors import ProductValidationError
from app.db.session import Base
from app.validation.rules import CATEGORIES, check_category_fields

OPTION_KINDS = ("colors", "variants", "size")

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class Product(Base):
    __tablename__ = "products"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String(100), nullable=False, unique=True, index=True)
    brand = Column(String(50), nullable=False, index=True)
    seller = Column(String(50), nullable=False)
    product_description = Column(Text, nullable=False)
    price = Column(Float, nullable=False, index=True)
    discount = Column(Float, nullable=True)
    ratings = Column(Float, nullable=True)
    cod_availability = Column(Boolean, nullable=False)
    total_stock_availability = Column(Integer, nullable=False)
    category = Column(String(20), nullable=False, index=True)
    is_active = Column(Boolean, nullable=False)
    is_featured = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    options = relationship(
        "ProductOption",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductOption.position",
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("name", "brand", name="uq_products_name_brand"),
        CheckConstraint(f"category IN {CATEGORIES!r}", name="ck_products_category"),
        CheckConstraint("price >= 0 AND price <= 999999.99", name="ck_products_price"),
        CheckConstraint("total_stock_availability >= 0 AND total_stock_availability <= 999999", name="ck_products_stock"),
    )

    def _values(self, kind: str) -> list[str]:
        return [option.value for option in self.options if option.kind == kind]

    @property
    def colors(self) -> list[str]:
        return self._values("colors")

    @property
    def variants(self) -> list[str]:
        return self._values("variants")

    @property
    def size(self) -> list[str]:
        return self._values("size")

    def set_options(self, colors: list[str], variants: list[str], size: list[str]) -> None:
        by_kind = {"colors": colors, "variants": variants, "size": size}
        self.options = [
            ProductOption(kind=kind, value=value, position=position)
            for kind in OPTION_KINDS
            for position, value in enumerate(by_kind[kind] or [])
        ]

    def to_record(self) -> dict:
        """Wire-shaped copy of the editable fields, used to merge partial updates."""
        return {
            "name": self.name,
            "brand": self.brand,
            "seller": self.seller,
            "product_description": self.product_description,
            "price": self.price,
            "discount": self.discount,
            "ratings": self.ratings,
            "cod_availability": self.cod_availability,
            "total_stock_availability": self.total_stock_availability,
            "category": self.category,
            "colors": self.colors,
            "variants": self.variants,
            "size": self.size,
            "isActive": self.is_active,
            "isFeatured": self.is_featured,
        }


class ProductOption(Base):
    __tablename__ = "product_options"

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    kind = Column(String(10), nullable=False)
    value = Column(String(50), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    product = relationship("Product", back_populates="options")

    __table_args__ = (
        CheckConstraint(f"kind IN {OPTION_KINDS!r}", name="ck_product_options_kind"),
    )


@event.listens_for(Product, "before_insert")
@event.listens_for(Product, "before_update")
def check_category_invariants(mapper, connection, target: Product) -> None:
    errors = check_category_fields(target.to_record())
    if errors:
        raise ProductValidationError(errors)
