# domain/models.py

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class OrderStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


@dataclass
class Item:
    """
    A catalog entry, either an individually priced product or a kit.

    Kits always carry price 0; their cost is billed to head office.
    """
    id: str
    name_en: str
    name_fr: str
    category: str
    price: Decimal
    is_kit: bool = False
    description_en: str = ""
    description_fr: str = ""
    images: List[str] = field(default_factory=list)
    sizes: Optional[List[str]] = None
    products: Optional[List[str]] = None  # constituent products, kits only

    def name(self, language: str = "en") -> str:
        return self.name_fr if language == "fr" else self.name_en

    def description(self, language: str = "en") -> str:
        return self.description_fr if language == "fr" else self.description_en

    @property
    def image(self) -> Optional[str]:
        return self.images[0] if self.images else None


@dataclass
class CartLine:
    """
    One line in the cart. Lines merge on (item id, size, store id).
    """
    item: Item
    quantity: int
    size: Optional[str] = None
    store_id: Optional[str] = None  # None means "no store chosen yet"

    @property
    def key(self) -> tuple:
        return self.item.id, self.size, self.store_id

    @property
    def is_kit(self) -> bool:
        return self.item.is_kit

    @property
    def unit_price(self) -> Decimal:
        return self.item.price

    @property
    def extended_price(self) -> Decimal:
        return self.item.price * self.quantity


@dataclass
class Store:
    id: str
    name: str
    address: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None


@dataclass
class CurrentUser:
    id: str
    email: str


@dataclass
class OrderItem:
    """
    Snapshot of a cart line at order time.
    """
    quantity: int
    unit_price: Decimal
    extended_price: Decimal
    is_kit: bool
    product_id: Optional[str] = None
    kit_id: Optional[str] = None
    size: Optional[str] = None
    id: Optional[str] = None
    name_en: str = ""
    name_fr: str = ""
    images: List[str] = field(default_factory=list)

    def name(self, language: str = "en") -> str:
        return self.name_fr if language == "fr" else self.name_en


@dataclass
class Order:
    """
    A submitted order for one destination store.
    """
    id: str
    order_number: str
    user_id: str
    store_id: str
    kit_subtotal: Decimal
    individual_subtotal: Decimal
    shipping_amount: Decimal
    tax_amount: Decimal
    total: Decimal
    order_status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    created_at: Optional[str] = None
    notes: Optional[str] = None
    store_name: Optional[str] = None
    items: List[OrderItem] = field(default_factory=list)
