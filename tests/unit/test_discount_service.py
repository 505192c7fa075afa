import uuid
from datetime import datetime, timedelta

import pytest

from app.models.subscription_enums import DiscountType
from app.schemas.discounts import DiscountResponse
from app.services import discount_service as ds
from app.services.discount_service import DiscountService

NOW = datetime(2024, 5, 1, 12, 0)


def make_discount(**overrides) -> DiscountResponse:
    values = {
        "id": uuid.uuid4(),
        "name": "Spring",
        "code": "SPRING",
        "type": DiscountType.PERCENTAGE,
        "value": 10,
    }
    values.update(overrides)
    return DiscountResponse(**values)


class TestCheckRules:
    """Rule order and messages of a known discount."""

    def test_applies_when_every_rule_passes(self):
        assert DiscountService.check_rules(make_discount(), uuid.uuid4(), "1 Month", NOW) is None

    def test_inactive_wins_over_expired(self):
        discount = make_discount(is_active=False, end_date=NOW - timedelta(days=1))
        assert DiscountService.check_rules(discount, uuid.uuid4(), "1 Month", NOW) == ds.MSG_INACTIVE

    def test_not_started(self):
        discount = make_discount(start_date=NOW + timedelta(hours=1))
        assert DiscountService.check_rules(discount, uuid.uuid4(), "1 Month", NOW) == ds.MSG_NOT_STARTED

    def test_expired(self):
        discount = make_discount(end_date=NOW - timedelta(seconds=1))
        assert DiscountService.check_rules(discount, uuid.uuid4(), "1 Month", NOW) == ds.MSG_EXPIRED

    def test_plan_scope(self):
        allowed = uuid.uuid4()
        discount = make_discount(applies_to_all_plans=False, applicable_plan_ids=[allowed])
        assert DiscountService.check_rules(discount, allowed, "1 Month", NOW) is None
        assert DiscountService.check_rules(discount, uuid.uuid4(), "1 Month", NOW) == ds.MSG_WRONG_PLAN

    def test_plan_scope_checked_before_duration_scope(self):
        discount = make_discount(
            applies_to_all_plans=False,
            applicable_plan_ids=[],
            applies_to_all_durations=False,
            applicable_durations=["6 Months"],
        )
        assert DiscountService.check_rules(discount, uuid.uuid4(), "1 Month", NOW) == ds.MSG_WRONG_PLAN

    def test_duration_scope(self):
        discount = make_discount(applies_to_all_durations=False, applicable_durations=["6 Months"])
        assert DiscountService.check_rules(discount, uuid.uuid4(), "6 Months", NOW) is None
        assert DiscountService.check_rules(discount, uuid.uuid4(), "1 Month", NOW) == ds.MSG_WRONG_DURATION


class TestComputeDiscount:
    def test_no_discount(self):
        breakdown = DiscountService.compute_discount(1200, None)
        assert (breakdown.original_price, breakdown.discount_amount, breakdown.final_amount) == (1200, 0, 1200)

    def test_percentage(self):
        breakdown = DiscountService.compute_discount(1200, make_discount(value=15))
        assert breakdown.discount_amount == 180
        assert breakdown.final_amount == 1020

    def test_flat(self):
        breakdown = DiscountService.compute_discount(
            1200, make_discount(type=DiscountType.FLAT, value=200)
        )
        assert breakdown.discount_amount == 200
        assert breakdown.final_amount == 1000

    def test_flat_amount_is_clamped_to_price(self):
        breakdown = DiscountService.compute_discount(
            150, make_discount(type=DiscountType.FLAT, value=200)
        )
        assert breakdown.discount_amount == 150
        assert breakdown.final_amount == 0

    def test_amounts_always_add_up(self):
        breakdown = DiscountService.compute_discount(999.99, make_discount(value=33))
        assert round(breakdown.discount_amount + breakdown.final_amount, 2) == 999.99


class TestValidateDiscountCode:
    @pytest.mark.parametrize("code", [None, "", "   "])
    async def test_empty_code(self, test_db, code):
        result = await DiscountService.validate_discount_code(test_db, code, uuid.uuid4(), "1 Month")
        assert not result.success
        assert result.message == ds.MSG_EMPTY

    async def test_unknown_code(self, test_db, save200):
        result = await DiscountService.validate_discount_code(test_db, "NOPE", uuid.uuid4(), "1 Month")
        assert not result.success
        assert result.message == ds.MSG_UNKNOWN

    async def test_code_matches_ignoring_case_and_whitespace(self, test_db, save200):
        result = await DiscountService.validate_discount_code(test_db, "  save200 ", uuid.uuid4(), "1 Month")
        assert result.success
        assert result.message == ds.MSG_APPLIED
        assert result.discount.id == save200.id

    async def test_inactive_code_is_rejected(self, test_db, save200):
        save200.is_active = False
        await test_db.commit()
        result = await DiscountService.validate_discount_code(test_db, "SAVE200", uuid.uuid4(), "1 Month")
        assert not result.success
        assert result.message == ds.MSG_INACTIVE
