"""Domain entities."""
from .order import Order, OrderItem, calculate_total, round_money

__all__ = ["Order", "OrderItem", "calculate_total", "round_money"]
