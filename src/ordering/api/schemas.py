"""Pydantic request/response schemas for the Ordering API."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------


class StatusResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "ok"}]}}

    status: str = "ok"


class AddressSchema(BaseModel):
    postal_code: str = Field(..., max_length=9)
    street: str = Field("", max_length=255)
    number: str = Field("", max_length=20)
    complement: str = Field("", max_length=100)
    district: str = Field("", max_length=100)
    city: str = Field("", max_length=100)
    region: str = Field("", max_length=2)


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------


class AddressLookupResponse(BaseModel):
    postal_code: str
    street: str
    district: str
    city: str
    region: str


class QuoteResponse(BaseModel):
    quote_id: str | None = None
    fee: float
    expires_at: datetime | None = None
    fallback: bool = False
    warning: str | None = None


class QuoteSchema(BaseModel):
    quote_id: str | None = None
    fee: float
    expires_at: datetime | None = None
    fallback: bool = False


class CartLineSchema(BaseModel):
    line_id: str
    product_id: str
    name: str
    unit_price: float
    quantity: int = Field(1, ge=1)


class PaymentSchema(BaseModel):
    method: str = Field(..., max_length=20)
    token: str | None = None
    payment_method_id: str | None = None
    payer_email: str | None = None
    installments: int = Field(1, ge=1, le=3)
    issuer_id: str | None = None
    identification_type: str | None = None
    identification_number: str | None = None


class CheckoutRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": "cust-001",
                    "customer_name": "Maria Silva",
                    "customer_email": "maria@example.com",
                    "items": [
                        {
                            "line_id": "line-1",
                            "product_id": "prod-trufas",
                            "name": "Trufas",
                            "unit_price": 45.0,
                            "quantity": 1,
                        }
                    ],
                    "delivery_type": "pickup",
                    "payment": {"method": "pix"},
                }
            ]
        }
    }

    customer_id: str
    customer_name: str = ""
    customer_email: str | None = None
    items: list[CartLineSchema]
    delivery_type: Literal["pickup", "ship"] = "pickup"
    address: AddressSchema | None = None
    quote: QuoteSchema | None = None
    recipient_name: str | None = None
    recipient_phone: str | None = None
    coupon_code: str | None = None
    requested_time: datetime | None = None
    note: str | None = None
    payment: PaymentSchema


class CheckoutResponse(BaseModel):
    status: str
    order_id: str | None = None
    payment_id: str | None = None
    qr_code: str | None = None
    qr_code_base64: str | None = None
    delivery_id: str | None = None
    warnings: list[str] = []
    reason: str | None = None
    detail: str | None = None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


class ChangeOrderStatusRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "in_production"}]}}

    status: str = Field(..., max_length=20)


class ConfirmPaymentRequest(BaseModel):
    payment_id: str | None = None


class OrderSummaryResponse(BaseModel):
    order_id: str
    customer_id: str
    status: str
    status_label: str
    payment_status: str
    total: float
    delivery_type: str
    points_earned: int
    created_at: datetime | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderSummaryResponse]


class LoyaltyPointsResponse(BaseModel):
    customer_id: str
    points: int


class OrderItemResponse(BaseModel):
    product_id: str
    name: str
    quantity: int
    unit_price: float


class OrderDetailResponse(BaseModel):
    order_id: str
    customer_id: str
    status: str
    status_label: str
    subtotal: float
    discount: float
    coupon_code: str | None = None
    delivery_fee: float
    total: float
    payment_method: str
    payment_status: str
    payment_id: str | None = None
    delivery_type: str
    delivery_address: AddressSchema | None = None
    requested_time: datetime | None = None
    note: str | None = None
    points_earned: int
    courier_delivery_id: str | None = None
    courier_tracking_url: str | None = None
    items: list[OrderItemResponse]
    created_at: datetime | None = None


# ---------------------------------------------------------------------------
# Coupons
# ---------------------------------------------------------------------------


class CreateCouponRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"code": "DESCONTO10", "percent_off": 10}]}}

    code: str = Field(..., max_length=50)
    percent_off: int | None = Field(None, ge=1, le=100)
    flat_off: float | None = None
    minimum_spend: float | None = None
    expires_on: date | None = None


class UpdateCouponRequest(BaseModel):
    percent_off: int | None = Field(None, ge=0, le=100)
    flat_off: float | None = None
    minimum_spend: float | None = None
    expires_on: date | None = None
    active: bool | None = None


class CouponIdResponse(BaseModel):
    coupon_id: str


class CouponResponse(BaseModel):
    coupon_id: str
    code: str
    percent_off: int | None = None
    flat_off: float | None = None
    minimum_spend: float | None = None
    expires_on: date | None = None
    active: bool


class CouponListResponse(BaseModel):
    coupons: list[CouponResponse]


class ValidateCouponRequest(BaseModel):
    code: str
    subtotal: float


class CouponDiscountResponse(BaseModel):
    code: str
    discount: float
    total: float


# ---------------------------------------------------------------------------
# Ledger
# ---------------------------------------------------------------------------


class RecordLedgerEntryRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"kind": "debit", "amount": 80.0, "description": "Farinha e açúcar", "payment_method": "pix"}]
        }
    }

    kind: str = Field(..., max_length=10)
    amount: float
    description: str = Field(..., max_length=255)
    payment_method: str | None = Field(None, max_length=30)
    order_id: str | None = None


class LedgerEntryIdResponse(BaseModel):
    entry_id: str


class LedgerEntryResponse(BaseModel):
    entry_id: str
    kind: str
    amount: float
    description: str
    payment_method: str | None = None
    order_id: str | None = None
    recorded_at: datetime | None = None


class LedgerEntryListResponse(BaseModel):
    entries: list[LedgerEntryResponse]


class CashSummaryResponse(BaseModel):
    credits: float
    debits: float
    balance: float


# ---------------------------------------------------------------------------
# Courier deliveries
# ---------------------------------------------------------------------------


class CourierDeliveryResponse(BaseModel):
    delivery_id: str
    status: str
    tracking_url: str | None = None
