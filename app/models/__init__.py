"""Application models package."""

from app.models.blackout import Blackout
from app.models.menu_image import MenuImage
from app.models.order import Order
from app.models.policy import Policy
from app.models.student import Student

__all__ = ["Blackout", "MenuImage", "Order", "Policy", "Student"]
