"""
Shared Pydantic schemas used across the application.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from shared.config.constants import Limits


# =============================================================================
# Common Types
# =============================================================================

OrderStatus = Literal["pending", "preparing", "ready", "delivered", "paid"]
TableStatus = Literal["available", "occupied"]
ItemCategory = Literal["dish", "drink"]

# Decimal on the server, plain JSON number on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class SuccessResponse(BaseModel):
    """Acknowledgement for writes that return nothing else."""

    success: bool = True


# =============================================================================
# Order Schemas
# =============================================================================


class SelectedAddOnInput(BaseModel):
    """Add-on selection as sent by the ordering UI. Client prices are ignored."""

    model_config = ConfigDict(extra="ignore")

    id: int


class OrderItemInput(BaseModel):
    """
    One line of a new order.

    Quantity bounds are checked by the order repository so that every
    constraint violation reaches the client as the same 400 error.
    """

    model_config = ConfigDict(extra="ignore")

    id: int  # menu item id
    quantity: int
    observation: str | None = Field(default=None, max_length=Limits.MAX_OBSERVATION_LENGTH)
    addon_ids: list[int] = Field(default_factory=list)
    selectedAddons: list[SelectedAddOnInput] = Field(default_factory=list)

    def all_addon_ids(self) -> list[int]:
        return [*self.addon_ids, *(a.id for a in self.selectedAddons)]


class OrderCreateRequest(BaseModel):
    """New order from a table (table_id) or from the counter (table_id null)."""

    model_config = ConfigDict(extra="ignore")

    table_id: int | None = None
    items: list[OrderItemInput]
    total_price: Decimal | None = None  # client-side total, checked against the catalog


class OrderCreatedResponse(BaseModel):
    id: int
    created_at: datetime
    total_price: Money


class UpdateOrderStatusRequest(BaseModel):
    """Status change. Unknown values are rejected by the repository with 400."""

    status: str


class CloseTableResponse(BaseModel):
    success: bool = True
    closed_orders: int


class OrderLineAddOnOutput(BaseModel):
    id: int
    addon_id: int
    name: str
    price_at_time: Money


class OrderLineOutput(BaseModel):
    id: int
    item_id: int
    name: str
    quantity: int
    price_at_time: Money
    observation: str | None = None
    addons: list[OrderLineAddOnOutput] = Field(default_factory=list)


class OrderOutput(BaseModel):
    """Order with its lines and add-ons resolved for display."""

    id: int
    table_id: int | None = None
    table_number: int | None = None
    total_price: Money
    status: OrderStatus
    created_at: datetime
    items: list[OrderLineOutput] = Field(default_factory=list)


# =============================================================================
# Table Schemas
# =============================================================================


class TableCreateRequest(BaseModel):
    number: int = Field(ge=1)


class TableOutput(BaseModel):
    """Dining table with derived occupancy."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    number: int
    status: TableStatus


# =============================================================================
# Catalog Schemas
# =============================================================================


class MenuItemCreate(BaseModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    category: ItemCategory
    is_dish_of_day: bool = False
    image_url: str | None = Field(default=None, max_length=Limits.MAX_URL_LENGTH)
    observation_info: str | None = Field(default=None, max_length=Limits.MAX_OBSERVATION_LENGTH)


class MenuItemUpdate(BaseModel):
    """Partial update. Only fields present in the body are written."""

    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    category: ItemCategory | None = None
    is_dish_of_day: bool | None = None
    image_url: str | None = Field(default=None, max_length=Limits.MAX_URL_LENGTH)
    observation_info: str | None = Field(default=None, max_length=Limits.MAX_OBSERVATION_LENGTH)


class MenuItemOutput(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    price: Money
    category: ItemCategory
    is_dish_of_day: bool
    image_url: str | None = None
    observation_info: str | None = None


class AddOnCreate(BaseModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)


class AddOnUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)


class AddOnOutput(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: Money


# =============================================================================
# Staff Schemas
# =============================================================================


class EmployeeCreate(BaseModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    role: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)


class EmployeeOutput(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    role: str


# =============================================================================
# Reporting Schemas
# =============================================================================


class SalesPoint(BaseModel):
    date: str  # YYYY-MM-DD
    total: Money


class SalesStats(BaseModel):
    """Sales summary for the back-office dashboard."""

    model_config = ConfigDict(populate_by_name=True)

    daily: Money
    weekly: Money
    monthly: Money
    sales_over_time: list[SalesPoint] = Field(
        default_factory=list,
        serialization_alias="salesOverTime",
    )


# =============================================================================
# Real-time Schemas
# =============================================================================


class RealtimeInfo(BaseModel):
    """How clients should connect and reconnect to the real-time channel."""

    path: str
    reconnect_delay_ms: int
    connections: int
