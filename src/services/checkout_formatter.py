# src/services/checkout_formatter.py

"""Build the WhatsApp order message and deep link for a vendor."""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from urllib.parse import quote

from src.config.settings import Settings
from src.models.cart_item import CartLineItem
from src.models.errors import EmptyCartError
from src.models.product import Vendor

logger = logging.getLogger("storefront.checkout")

_NON_DIGIT_RE = re.compile(r"\D")

# Characters encodeURIComponent leaves untouched besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"

_FRACTION_STEP = Decimal("0.001")


@dataclass(frozen=True)
class CheckoutMessage:
    """The text to send and the link that opens it in WhatsApp."""

    message_text: str
    deep_link: str
    total: Decimal
    line_count: int


def format_amount(amount: Decimal) -> str:
    """Render an amount with thousands separators.

    At most three fraction digits are kept (half-up) and trailing zeros
    are dropped: ``3300`` -> ``"3,300"``, ``1250.50`` -> ``"1,250.5"``.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 4)
        rounded = amount.quantize(_FRACTION_STEP, rounding=ROUND_HALF_UP)
    text = f"{rounded:,f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def digits_only(phone_number: str) -> str:
    return _NON_DIGIT_RE.sub("", phone_number)


def build_deep_link(phone_number: str, message_text: str) -> str:
    """``https://wa.me/{digits}?text={encoded}`` for *phone_number*."""
    encoded = quote(message_text, safe=_URI_COMPONENT_SAFE)
    return (
        f"{Settings.WHATSAPP_BASE_URL}/{digits_only(phone_number)}"
        f"?text={encoded}"
    )


def format_checkout(
    cart_items: Iterable[CartLineItem],
    vendor: Vendor,
    currency: str | None = None,
) -> CheckoutMessage:
    """Format the vendor's share of the cart as an order message.

    Only lines whose product belongs to *vendor* are included; lines
    from other vendors are left for their own checkout.

    Raises:
        EmptyCartError: the cart holds nothing from *vendor*.
    """
    symbol = Settings.CURRENCY_SYMBOL if currency is None else currency
    all_items = list(cart_items)
    lines_for_vendor = [
        it for it in all_items if it.product.vendor_id == vendor.id
    ]
    skipped = len(all_items) - len(lines_for_vendor)
    if skipped:
        logger.info(
            "Checkout for %s skips %d lines from other vendors",
            vendor.store_slug,
            skipped,
        )
    if not lines_for_vendor:
        raise EmptyCartError(
            f"Cart has no items from {vendor.business_name}"
        )

    total = sum((it.subtotal for it in lines_for_vendor), Decimal(0))

    lines = [
        f"Hello {vendor.business_name}, I want to place an order:",
        "",
    ]
    for it in lines_for_vendor:
        lines.append(
            f"{Settings.LINE_MARKER} {it.product.name} (x{it.quantity})"
            f" - {symbol}{format_amount(it.subtotal)}"
        )
    lines.append("")
    lines.append(f"Total: {symbol}{format_amount(total)}")
    lines.append("")
    lines.append(Settings.CONFIRMATION_LINE)

    message_text = "\n".join(lines)
    deep_link = build_deep_link(vendor.whatsapp_number, message_text)
    logger.debug(
        "Checkout message for %s: %d lines, total %s",
        vendor.store_slug,
        len(lines_for_vendor),
        total,
    )
    return CheckoutMessage(
        message_text=message_text,
        deep_link=deep_link,
        total=total,
        line_count=len(lines_for_vendor),
    )
