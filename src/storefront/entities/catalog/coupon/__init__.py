"""Entity package: DiscountCoupon."""

from .entity import (
    CouponCreate,
    CouponCreateBody,
    CouponDetails,
    CouponPatch,
    CouponPatchBody,
    check_details,
    normalize_discount,
    stored_details,
)
from .repository import CouponRepository
from .table import CouponTable, CouponUsageTable

__all__ = [
    "CouponCreate",
    "CouponCreateBody",
    "CouponDetails",
    "CouponPatch",
    "CouponPatchBody",
    "CouponRepository",
    "CouponTable",
    "CouponUsageTable",
    "check_details",
    "normalize_discount",
    "stored_details",
]
