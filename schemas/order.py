from pydantic import BaseModel, Field, AliasChoices
from typing import List, Optional
from datetime import datetime


def camel(name: str, alias: str, default=...):
    """Field read from either spelling and written out in camelCase."""
    return Field(default, validation_alias=AliasChoices(name, alias), serialization_alias=alias)


class MenuItemCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    image: Optional[str] = None
    price: float = Field(..., ge=0)

class MenuItemResponse(MenuItemCreate):
    id: int

    class Config:
        from_attributes = True

class OrderItemCreate(BaseModel):
    menu_id: int = camel("menu_id", "menuId")
    quantity: int = Field(1, ge=1)

class OrderCreate(BaseModel):
    franchise_id: int = camel("franchise_id", "franchiseId")
    store_id: int = camel("store_id", "storeId")
    items: List[OrderItemCreate] = Field(..., min_length=1)

class OrderItemResponse(BaseModel):
    id: int
    menu_id: int = camel("menu_id", "menuId")
    description: Optional[str] = None
    price: float
    quantity: int

    class Config:
        from_attributes = True

class OrderResponse(BaseModel):
    id: int
    user_id: int = camel("user_id", "userId")
    franchise_id: int = camel("franchise_id", "franchiseId")
    store_id: int = camel("store_id", "storeId")
    created_at: Optional[datetime] = camel("created_at", "date", None)
    total: float
    items: List[OrderItemResponse]

    class Config:
        from_attributes = True

class OrderCreatedResponse(BaseModel):
    order: OrderResponse

class OrderHistoryResponse(BaseModel):
    user_id: int = camel("user_id", "userId")
    orders: List[OrderResponse]
    page: int
