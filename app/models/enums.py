from enum import Enum


class CouponStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"


class CouponType(str, Enum):
    DEAL = "deal"
    COUPON = "coupon"
