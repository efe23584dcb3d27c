from app.models.product import Product, ProductOption

__all__ = ["Product", "ProductOption"]
