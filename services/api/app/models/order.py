from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from packages.shared.schemas.order_v1 import ColorTypeV1, OrderStatusV1


class OrderFileInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_key: str = Field(..., alias="fileKey", min_length=1)
    original_filename: str = Field(..., alias="originalFilename", min_length=1)
    page_count: int = Field(..., alias="pageCount", ge=1)
    color_type: ColorTypeV1 = Field(..., alias="colorType")
    is_double_sided: bool = Field(..., alias="isDoubleSided")
    pages_per_side: int = Field(1, alias="pagesPerSide")
    copies: int = Field(1, ge=1, le=100)
    comments: str | None = None

    @field_validator("pages_per_side")
    @classmethod
    def _pages_per_side(cls, value: int) -> int:
        if value not in {1, 2, 4}:
            raise ValueError("pagesPerSide must be 1, 2 or 4")
        return value


class OrderQuoteRequest(BaseModel):
    files: list[OrderFileInput] = Field(..., min_length=1)


class OrderCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    files: list[OrderFileInput] = Field(..., min_length=1)
    delivery_hostel: str = Field(..., alias="deliveryHostel", min_length=1)
    delivery_gate: str = Field(..., alias="deliveryGate", min_length=1)
    delivery_phone: str = Field(..., alias="deliveryPhone", min_length=1)
    expected_time: str | None = Field(None, alias="expectedTime")
    notes: str | None = None


class OrderQuoteResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_price: float = Field(..., alias="totalPrice")


class OrderCreateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(..., alias="orderId")
    total_price: float = Field(..., alias="totalPrice")
    status: OrderStatusV1


class OrderFileOut(BaseModel):
    id: str
    file_key: str
    original_filename: str
    page_count: int
    color_type: ColorTypeV1
    is_double_sided: bool
    pages_per_side: int
    copies: int
    comments: str | None = None


class OrderOut(BaseModel):
    id: str
    status: OrderStatusV1
    total_price: float

    delivery_hostel: str
    delivery_gate: str
    delivery_phone: str
    expected_time: str | None = None
    notes: str | None = None

    created_at: str
    updated_at: str

    # Student view.
    vendor_name: str | None = None
    vendor_phone: str | None = None

    # Vendor view.
    user_email: str | None = None
    user_name: str | None = None

    files: list[OrderFileOut] = Field(default_factory=list)


class OrderStatusUpdateRequest(BaseModel):
    status: OrderStatusV1


class SuccessResponse(BaseModel):
    success: bool = True
