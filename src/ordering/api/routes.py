"""FastAPI endpoints for the Ordering domain."""

from fastapi import APIRouter, HTTPException
from protean.utils.globals import current_domain

from delivery.address import get_lookup
from delivery.address.port import AddressLookupError, DeliveryAddress, ResolvedAddress
from delivery.address.resolver import AddressResolver
from delivery.courier import get_courier
from delivery.courier.port import CourierError
from delivery.dispatch import CourierDispatcher
from delivery.quoting import DeliveryQuote, DeliveryQuoter
from ordering.api.schemas import (
    AddressLookupResponse,
    AddressSchema,
    CashSummaryResponse,
    ChangeOrderStatusRequest,
    CheckoutRequest,
    CheckoutResponse,
    ConfirmPaymentRequest,
    CouponDiscountResponse,
    CouponIdResponse,
    CouponListResponse,
    CouponResponse,
    CourierDeliveryResponse,
    CreateCouponRequest,
    LedgerEntryIdResponse,
    LedgerEntryListResponse,
    LedgerEntryResponse,
    LoyaltyPointsResponse,
    OrderDetailResponse,
    OrderItemResponse,
    OrderListResponse,
    OrderSummaryResponse,
    QuoteResponse,
    RecordLedgerEntryRequest,
    StatusResponse,
    UpdateCouponRequest,
    ValidateCouponRequest,
)
from ordering.cart.cart import CartItem, CartStore
from ordering.cart.storage import InMemoryCartStorage
from ordering.checkout.assembler import Customer, OrderAssembler
from ordering.checkout.flow import Checkout, CheckoutOutcome, PaymentInstrument
from ordering.checkout.session import CheckoutSession
from ordering.coupon.coupon import Coupon, find_coupon
from ordering.coupon.management import CreateCoupon, DeactivateCoupon, UpdateCoupon
from ordering.ledger.recording import RecordLedgerEntry
from ordering.ledger.summary import list_entries, summarize
from ordering.order.order import DeliveryType, Order
from ordering.order.payment import ConfirmOrderPayment
from ordering.order.status import ChangeOrderStatus
from ordering.tracking.tracker import OrderRow, list_orders, loyalty_balance, status_label
from payments.gateway import get_gateway
from payments.initiator import PaymentInitiator
from shared.money import D, round_money, to_float
from shared.queries import fetch_all

checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
coupon_router = APIRouter(prefix="/coupons", tags=["coupons"])
ledger_router = APIRouter(prefix="/ledger", tags=["ledger"])
delivery_router = APIRouter(prefix="/deliveries", tags=["deliveries"])


def _checkout() -> Checkout:
    return Checkout(
        initiator=PaymentInitiator(get_gateway()),
        assembler=OrderAssembler(),
        dispatcher=CourierDispatcher(get_courier()),
    )


def _session_from(body: CheckoutRequest) -> CheckoutSession:
    storage = InMemoryCartStorage()
    cart = CartStore(
        storage,
        [
            CartItem(
                line_id=line.line_id,
                product_id=line.product_id,
                name=line.name,
                unit_price=round_money(line.unit_price),
                quantity=line.quantity,
            )
            for line in body.items
        ],
    )
    session = CheckoutSession(cart)
    session.requested_time = body.requested_time
    session.note = body.note

    if body.delivery_type == DeliveryType.SHIP.value:
        session.choose_ship()
        if body.address is not None:
            session.resolved_address = ResolvedAddress(
                postal_code=body.address.postal_code,
                street=body.address.street,
                district=body.address.district,
                city=body.address.city,
                region=body.address.region,
            )
            session.update_address(number=body.address.number, complement=body.address.complement)
        if body.quote is not None:
            session.quote = DeliveryQuote(
                fee=round_money(body.quote.fee),
                quote_id=body.quote.quote_id,
                expires_at=body.quote.expires_at,
                fallback=body.quote.fallback,
            )
        session.set_recipient(body.recipient_name or body.customer_name, body.recipient_phone or "")
    else:
        session.choose_pickup()

    if body.coupon_code:
        session.apply_coupon(find_coupon(body.coupon_code))
    return session


def _checkout_response(outcome: CheckoutOutcome) -> CheckoutResponse:
    data = {"status": outcome.status}
    for name in ("order_id", "payment_id", "qr_code", "qr_code_base64", "delivery_id", "reason", "detail"):
        if hasattr(outcome, name):
            data[name] = getattr(outcome, name)
    if hasattr(outcome, "warnings"):
        data["warnings"] = list(outcome.warnings)
    return CheckoutResponse(**data)


def _summary_response(row: OrderRow) -> OrderSummaryResponse:
    return OrderSummaryResponse(
        order_id=row.order_id,
        customer_id=row.customer_id,
        status=row.status,
        status_label=row.status_label,
        payment_status=row.payment_status,
        total=row.total,
        delivery_type=row.delivery_type,
        points_earned=row.points_earned,
        created_at=row.created_at,
    )


def _address_response(address) -> AddressSchema | None:
    if address is None:
        return None
    return AddressSchema(
        postal_code=address.postal_code,
        street=address.street,
        number=address.number,
        complement=address.complement or "",
        district=address.district or "",
        city=address.city or "",
        region=address.region or "",
    )


def _coupon_response(coupon) -> CouponResponse:
    return CouponResponse(
        coupon_id=str(coupon.id),
        code=coupon.code,
        percent_off=coupon.percent_off,
        flat_off=coupon.flat_off,
        minimum_spend=coupon.minimum_spend,
        expires_on=coupon.expires_on,
        active=coupon.active,
    )


def _entry_response(entry) -> LedgerEntryResponse:
    return LedgerEntryResponse(
        entry_id=str(entry.id),
        kind=entry.kind,
        amount=entry.amount,
        description=entry.description,
        payment_method=entry.payment_method,
        order_id=str(entry.order_id) if entry.order_id else None,
        recorded_at=entry.recorded_at,
    )


# --- Checkout endpoints ---


@checkout_router.get("/address/{postal_code}", response_model=AddressLookupResponse)
def lookup_address(postal_code: str) -> AddressLookupResponse:
    try:
        address = AddressResolver(get_lookup()).resolve(postal_code)
    except AddressLookupError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return AddressLookupResponse(
        postal_code=address.postal_code,
        street=address.street,
        district=address.district,
        city=address.city,
        region=address.region,
    )


@checkout_router.post("/quote", response_model=QuoteResponse)
def quote_delivery(body: AddressSchema) -> QuoteResponse:
    address = DeliveryAddress(
        postal_code=body.postal_code,
        street=body.street,
        number=body.number,
        district=body.district,
        city=body.city,
        region=body.region,
        complement=body.complement,
    )
    quote = DeliveryQuoter(get_courier()).quote(address)
    return QuoteResponse(
        quote_id=quote.quote_id,
        fee=to_float(quote.fee),
        expires_at=quote.expires_at,
        fallback=quote.fallback,
        warning=quote.warning,
    )


@checkout_router.post("", response_model=CheckoutResponse)
def submit_checkout(body: CheckoutRequest) -> CheckoutResponse:
    session = _session_from(body)
    customer = Customer(customer_id=body.customer_id, name=body.customer_name, email=body.customer_email)
    instrument = PaymentInstrument(
        method=body.payment.method,
        token=body.payment.token,
        payment_method_id=body.payment.payment_method_id,
        payer_email=body.payment.payer_email,
        installments=body.payment.installments,
        issuer_id=body.payment.issuer_id,
        identification_type=body.payment.identification_type,
        identification_number=body.payment.identification_number,
    )
    outcome = _checkout().submit(session, customer, instrument)
    return _checkout_response(outcome)


# --- Order endpoints ---


@order_router.get("", response_model=OrderListResponse)
async def get_orders(customer_id: str | None = None, status: str | None = None) -> OrderListResponse:
    orders = list_orders(customer_id=customer_id, status=status)
    return OrderListResponse(orders=[_summary_response(OrderRow.from_order(o)) for o in orders])


@order_router.get("/points", response_model=LoyaltyPointsResponse)
async def get_loyalty_points(customer_id: str) -> LoyaltyPointsResponse:
    return LoyaltyPointsResponse(customer_id=customer_id, points=loyalty_balance(customer_id))


@order_router.get("/{order_id}", response_model=OrderDetailResponse)
async def get_order(order_id: str) -> OrderDetailResponse:
    order = current_domain.repository_for(Order).get(order_id)
    return OrderDetailResponse(
        order_id=str(order.id),
        customer_id=str(order.customer_id),
        status=order.status,
        status_label=status_label(order.status),
        subtotal=order.subtotal,
        discount=order.discount,
        coupon_code=order.coupon_code,
        delivery_fee=order.delivery_fee,
        total=order.total,
        payment_method=order.payment_method,
        payment_status=order.payment_status,
        payment_id=order.payment_id,
        delivery_type=order.delivery_type,
        delivery_address=_address_response(order.delivery_address),
        requested_time=order.requested_time,
        note=order.note,
        points_earned=order.points_earned,
        courier_delivery_id=order.courier_delivery_id,
        courier_tracking_url=order.courier_tracking_url,
        items=[
            OrderItemResponse(
                product_id=str(item.product_id),
                name=item.name,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for item in order.items
        ],
        created_at=order.created_at,
    )


@order_router.put("/{order_id}/status", response_model=StatusResponse)
async def change_order_status(order_id: str, body: ChangeOrderStatusRequest) -> StatusResponse:
    current_domain.process(ChangeOrderStatus(order_id=order_id, status=body.status), asynchronous=False)
    return StatusResponse()


@order_router.post("/{order_id}/payment-confirmation", response_model=StatusResponse)
async def confirm_order_payment(order_id: str, body: ConfirmPaymentRequest) -> StatusResponse:
    current_domain.process(ConfirmOrderPayment(order_id=order_id, payment_id=body.payment_id), asynchronous=False)
    return StatusResponse()


# --- Coupon endpoints ---


@coupon_router.post("", status_code=201, response_model=CouponIdResponse)
async def create_coupon(body: CreateCouponRequest) -> CouponIdResponse:
    command = CreateCoupon(
        code=body.code,
        percent_off=body.percent_off,
        flat_off=body.flat_off,
        minimum_spend=body.minimum_spend,
        expires_on=body.expires_on,
    )
    result = current_domain.process(command, asynchronous=False)
    return CouponIdResponse(coupon_id=result)


@coupon_router.get("", response_model=CouponListResponse)
async def get_coupons() -> CouponListResponse:
    coupons = fetch_all(Coupon, order_by="code")
    return CouponListResponse(coupons=[_coupon_response(c) for c in coupons])


@coupon_router.post("/validate", response_model=CouponDiscountResponse)
async def validate_coupon(body: ValidateCouponRequest) -> CouponDiscountResponse:
    coupon = find_coupon(body.code)
    discount = coupon.discount_for(body.subtotal)
    return CouponDiscountResponse(
        code=coupon.code,
        discount=to_float(discount),
        total=to_float(round_money(D(body.subtotal) - discount)),
    )


@coupon_router.put("/{coupon_id}", response_model=StatusResponse)
async def update_coupon(coupon_id: str, body: UpdateCouponRequest) -> StatusResponse:
    command = UpdateCoupon(
        coupon_id=coupon_id,
        percent_off=body.percent_off,
        flat_off=body.flat_off,
        minimum_spend=body.minimum_spend,
        expires_on=body.expires_on,
        active=body.active,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@coupon_router.delete("/{coupon_id}", response_model=StatusResponse)
async def deactivate_coupon(coupon_id: str) -> StatusResponse:
    current_domain.process(DeactivateCoupon(coupon_id=coupon_id), asynchronous=False)
    return StatusResponse()


# --- Ledger endpoints ---


@ledger_router.post("/entries", status_code=201, response_model=LedgerEntryIdResponse)
async def record_ledger_entry(body: RecordLedgerEntryRequest) -> LedgerEntryIdResponse:
    command = RecordLedgerEntry(
        kind=body.kind,
        amount=body.amount,
        description=body.description,
        payment_method=body.payment_method,
        order_id=body.order_id,
    )
    result = current_domain.process(command, asynchronous=False)
    return LedgerEntryIdResponse(entry_id=result)


@ledger_router.get("/entries", response_model=LedgerEntryListResponse)
async def get_ledger_entries(kind: str | None = None) -> LedgerEntryListResponse:
    return LedgerEntryListResponse(entries=[_entry_response(e) for e in list_entries(kind=kind)])


@ledger_router.get("/summary", response_model=CashSummaryResponse)
async def get_cash_summary() -> CashSummaryResponse:
    summary = summarize(list_entries())
    return CashSummaryResponse(
        credits=to_float(summary.credits),
        debits=to_float(summary.debits),
        balance=to_float(summary.balance),
    )


# --- Courier delivery endpoints ---


@delivery_router.get("/{delivery_id}", response_model=CourierDeliveryResponse)
def get_delivery(delivery_id: str) -> CourierDeliveryResponse:
    try:
        delivery = get_courier().delivery_status(delivery_id)
    except CourierError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return CourierDeliveryResponse(
        delivery_id=delivery.delivery_id, status=delivery.status, tracking_url=delivery.tracking_url
    )


@delivery_router.post("/{delivery_id}/cancel", response_model=CourierDeliveryResponse)
def cancel_delivery(delivery_id: str) -> CourierDeliveryResponse:
    try:
        delivery = get_courier().cancel(delivery_id)
    except CourierError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return CourierDeliveryResponse(
        delivery_id=delivery.delivery_id, status=delivery.status, tracking_url=delivery.tracking_url
    )
