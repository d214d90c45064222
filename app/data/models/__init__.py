#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from app.data.models.category import CategoryModel
from app.data.models.product import ProductModel
from app.data.models.customer import CustomerModel
from app.data.models.cart_line import CartLineModel
from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel
from app.data.models.review import ReviewModel
from app.data.models.newsletter import NewsletterSubscriberModel

__all__ = [
    "CategoryModel",
    "ProductModel",
    "CustomerModel",
    "CartLineModel",
    "OrderModel",
    "OrderItemModel",
    "ReviewModel",
    "NewsletterSubscriberModel",
]
