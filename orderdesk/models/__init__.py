from .models import User, Product, Order, OrderItem

__all__ = ["User", "Product", "Order", "OrderItem"]
