from sqlalchemy import Column, Integer, String, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    sku = Column(String, nullable=True, index=True)
    name = Column(String, nullable=False)
    regular_price = Column(String, nullable=True)  # Stored representation, passed through verbatim

    # Relationships
    meta = relationship("ProductMeta", back_populates="product", cascade="all, delete-orphan")


class ProductMeta(Base):
    """Key/value product attributes (wholesale price, barcode, ...)."""

    __tablename__ = "product_meta"
    __table_args__ = (UniqueConstraint("product_id", "meta_key", name="uq_product_meta_key"),)

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    meta_key = Column(String, nullable=False, index=True)
    meta_value = Column(Text, nullable=True)

    # Relationships
    product = relationship("Product", back_populates="meta")
