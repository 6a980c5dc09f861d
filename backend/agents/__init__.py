from .base import BaseAgent, UNAVAILABLE_MESSAGE
from .product_advisor import ProductAdvisorAgent

__all__ = [
    "BaseAgent",
    "ProductAdvisorAgent",
    "UNAVAILABLE_MESSAGE",
]
