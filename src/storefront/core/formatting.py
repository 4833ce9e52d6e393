"""Value formatting shared by the catalog views."""

import calendar
import math
import re
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.storefront.core.services.url_service import StorefrontUrls

UNKNOWN_STATUS = "Status Desconhecido"
NO_DATE = "0000-00-00"

PAYMENT_STATUS_LABELS = {
    "paid": "PAGO",
    "unpaid": "PENDENTE DE PAGAMENTO",
}

DELIVERY_STATUS_LABELS = {
    "cancelled": "CANCELADO",
    "pending": "A ENVIAR",
    "on_the_way": "A CAMINHO",
    "delivered": "ENTREGUE",
}

DISCOUNT_SYMBOLS = {"amount": "$", "percent": "%"}


def to_epoch(value: date | None) -> int | None:
    """Epoch seconds of ``value`` at UTC midnight."""
    if value is None:
        return None
    return calendar.timegm(value.timetuple()[:3] + (0, 0, 0))


def epoch_to_date(value: int | None) -> str | None:
    """Render epoch seconds as ``Y-m-d``."""
    if value is None:
        return None
    return datetime.fromtimestamp(value, UTC).strftime("%Y-%m-%d")


def timestamp(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.strftime("%Y-%m-%d %H:%M:%S")


def money(value: float | None) -> str:
    """Two decimals with a thousands separator, e.g. ``1,234.50``."""
    return f"{value or 0:,.2f}"


def payment_status_label(status: str | None) -> str:
    return PAYMENT_STATUS_LABELS.get(status or "", UNKNOWN_STATUS)


def delivery_status_label(status: str | None) -> str:
    return DELIVERY_STATUS_LABELS.get(status or "", UNKNOWN_STATUS)


def discount_value(discount: float, discount_type: str | None) -> str | float:
    """Amount discounts render as ``"%.2f"``; percentages stay numeric."""
    if discount_type == "amount":
        return f"{discount:.2f}"
    return int(discount) if float(discount).is_integer() else discount


def promotional_price(price: float, discount: float, discount_type: str | None) -> float:
    if not discount:
        return price
    if discount_type == "percent":
        return price - math.ceil(price * discount / 100)
    return price - discount


def split_variant(variant: str | None) -> tuple[str, str]:
    """Split ``"<color>-<size>"``; missing parts become empty strings."""
    parts = (variant or "").split("-", 1)
    color = parts[0]
    size = parts[1] if len(parts) > 1 else ""
    return color, size


def normalize_digits(value: str) -> str:
    """Strip everything but digits (cpf, phone, zip code)."""
    return re.sub(r"\D", "", value)


def is_valid_cpf(value: str) -> bool:
    """Check a Brazilian CPF number, formatted or not, by its check digits."""
    digits = normalize_digits(value)
    if len(digits) != 11 or digits == digits[0] * 11:
        return False
    numbers = [int(d) for d in digits]
    for position in (9, 10):
        total = sum(numbers[i] * (position + 1 - i) for i in range(position))
        check = (total * 10) % 11 % 10
        if check != numbers[position]:
            return False
    return True


def image_urls(location: str | None, urls: "StorefrontUrls") -> dict | None:
    """``{http, https}`` links for an upload; absolute links are kept as-is."""
    if not location:
        return None
    if location.startswith(("http://", "https://")):
        return {"http": location, "https": location}
    return urls.links(f"public/{location}")


def payment_date(details: dict | None) -> str:
    """``Y-m-d`` of the gateway ``dateTime`` in ``payment_details``."""
    raw = details.get("dateTime") if isinstance(details, dict) else None
    if not raw:
        return NO_DATE
    try:
        return datetime.fromisoformat(str(raw)).strftime("%Y-%m-%d")
    except ValueError:
        return NO_DATE
