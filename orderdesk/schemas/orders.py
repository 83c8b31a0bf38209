from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field


class ShippingAddress(BaseModel):
    full_name: str
    address: str
    city: str
    postal_code: str
    country: str


class OrderItemIn(BaseModel):
    product_id: Optional[int] = Field(None, alias="_id")
    name: str
    quantity: int = Field(gt=0)
    image: Optional[str] = None
    price: float = Field(ge=0)

    class Config:
        populate_by_name = True


class OrderCreateRequest(BaseModel):
    order_items: List[OrderItemIn]
    shipping_address: ShippingAddress
    payment_method: str
    items_price: float = Field(ge=0)
    shipping_price: float = Field(ge=0)
    tax_price: float = Field(ge=0)
    total_price: float = Field(ge=0)


class PaymentResult(BaseModel):
    id: Optional[str] = None
    status: Optional[str] = None
    update_time: Optional[str] = None
    email_address: Optional[str] = None


class OrderItemOut(BaseModel):
    id: int
    product_id: Optional[int] = None
    name: str
    quantity: int
    image: Optional[str] = None
    price: float

    class Config:
        from_attributes = True


class OrderUserOut(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class OrderOut(BaseModel):
    id: int
    user_id: Optional[int] = None
    user: Optional[OrderUserOut] = None
    shipping_address: ShippingAddress
    payment_method: str
    items_price: float
    shipping_price: float
    tax_price: float
    total_price: float
    is_paid: bool
    paid_at: Optional[datetime] = None
    is_delivered: bool
    delivered_at: Optional[datetime] = None
    payment_result: Optional[PaymentResult] = None
    created_at: datetime
    items: List[OrderItemOut]

    class Config:
        from_attributes = True


class OrderCreatedResponse(BaseModel):
    message: str
    order: OrderOut


class OrderPaidResponse(BaseModel):
    message: str
    order: OrderOut


class UsersSummary(BaseModel):
    num_users: int


class OrdersSummary(BaseModel):
    num_orders: int
    total_sales: float


class DailyOrders(BaseModel):
    date: str
    orders: int
    sales: float


class CategoryCount(BaseModel):
    category: str
    count: int


class SalesSummary(BaseModel):
    users: UsersSummary
    orders: OrdersSummary
    daily_orders: List[DailyOrders]
    product_categories: List[CategoryCount]
