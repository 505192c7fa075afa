"""Subscription-related enums.

This module contains enums used by the catalog, order and subscription models:
- QuotaPeriod: Window a quota feature is counted over
- OrderStatus: Lifecycle state of a checkout order
- UserPlanStatus: State of a plan history record
- DiscountType: How a discount value is applied
- PaymentMethodType: Payment rail of a payment method
"""

import enum


class QuotaPeriod(str, enum.Enum):
    """Window a quota feature is counted over."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    LIFETIME = "lifetime"


class OrderStatus(str, enum.Enum):
    """Status of an order. Everything except PENDING is terminal."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"

    @property
    def is_terminal(self) -> bool:
        return self is not OrderStatus.PENDING


class UserPlanStatus(str, enum.Enum):
    """Status of a plan history record."""

    CURRENT = "current"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class DiscountType(str, enum.Enum):
    PERCENTAGE = "percentage"
    FLAT = "flat"


class PaymentMethodType(str, enum.Enum):
    BANK = "bank"
    EASYPAISA = "easypaisa"
    JAZZCASH = "jazzcash"
    CRYPTO = "crypto"
