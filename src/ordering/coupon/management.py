"""Coupon book management: commands and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Date, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.coupon.coupon import Coupon, normalize_code
from ordering.domain import ordering


@ordering.command(part_of="Coupon")
class CreateCoupon:
    code = String(required=True, max_length=50)
    percent_off = Integer()
    flat_off = Float()
    minimum_spend = Float()
    expires_on = Date()


@ordering.command(part_of="Coupon")
class UpdateCoupon:
    coupon_id = Identifier(required=True)
    percent_off = Integer()
    flat_off = Float()
    minimum_spend = Float()
    expires_on = Date()
    active = Boolean()


@ordering.command(part_of="Coupon")
class DeactivateCoupon:
    coupon_id = Identifier(required=True)


@ordering.command_handler(part_of=Coupon)
class ManageCouponHandler:
    @handle(CreateCoupon)
    def create_coupon(self, command):
        repo = current_domain.repository_for(Coupon)
        code = normalize_code(command.code)
        if repo._dao.query.filter(code=code).all().items:
            raise ValidationError({"code": [f"Coupon {code} already exists"]})

        coupon = Coupon.create(
            code=code,
            percent_off=command.percent_off,
            flat_off=command.flat_off,
            minimum_spend=command.minimum_spend,
            expires_on=command.expires_on,
        )
        repo.add(coupon)
        return str(coupon.id)

    @handle(UpdateCoupon)
    def update_coupon(self, command):
        repo = current_domain.repository_for(Coupon)
        coupon = repo.get(command.coupon_id)
        coupon.update(
            percent_off=command.percent_off,
            flat_off=command.flat_off,
            minimum_spend=command.minimum_spend,
            expires_on=command.expires_on,
            active=command.active,
        )
        repo.add(coupon)

    @handle(DeactivateCoupon)
    def deactivate_coupon(self, command):
        repo = current_domain.repository_for(Coupon)
        coupon = repo.get(command.coupon_id)
        coupon.deactivate()
        repo.add(coupon)
