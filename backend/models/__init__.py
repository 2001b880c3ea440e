# backend/models/__init__.py
from .user_model import User
from .producer_profile_model import ProducerProfile
from .category_model import Category
from .product_model import Product
from .order_model import Order
from .order_item_model import OrderItem
from .payment_model import Payment
