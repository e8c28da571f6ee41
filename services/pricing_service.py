# services/pricing_service.py

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable

from domain.models import CartLine

FLAT_SHIPPING_RATE = Decimal("9.99")
TAX_RATE = Decimal("0.13")

ZERO = Decimal("0.00")
CENT = Decimal("0.01")


@dataclass(frozen=True)
class CartTotals:
    kit_subtotal: Decimal
    individual_subtotal: Decimal
    shipping_amount: Decimal
    tax_amount: Decimal
    charge_total: Decimal

    def __add__(self, other: "CartTotals") -> "CartTotals":
        return CartTotals(
            kit_subtotal=self.kit_subtotal + other.kit_subtotal,
            individual_subtotal=self.individual_subtotal + other.individual_subtotal,
            shipping_amount=self.shipping_amount + other.shipping_amount,
            tax_amount=self.tax_amount + other.tax_amount,
            charge_total=self.charge_total + other.charge_total,
        )


EMPTY_TOTALS = CartTotals(ZERO, ZERO, ZERO, ZERO, ZERO)


def round2(amount: Decimal) -> Decimal:
    """Round half-up to cents."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def kit_subtotal(lines: Iterable[CartLine]) -> Decimal:
    # kits are priced 0 today, but sum them anyway so audits stay right
    return round2(sum((ln.extended_price for ln in lines if ln.is_kit), ZERO))


def individual_subtotal(lines: Iterable[CartLine]) -> Decimal:
    return round2(sum((ln.extended_price for ln in lines if not ln.is_kit), ZERO))


def shipping_amount(individual: Decimal) -> Decimal:
    return FLAT_SHIPPING_RATE if individual > 0 else ZERO


def tax_amount(individual: Decimal, shipping: Decimal) -> Decimal:
    return round2((individual + shipping) * TAX_RATE)


def calculate_totals(lines: Iterable[CartLine]) -> CartTotals:
    """
    Derive every amount for a set of lines.

    Only the individually billed items and their shipping are taxed and
    charged; the kit subtotal is reported but billed to head office.
    """
    lines = list(lines)
    kits = kit_subtotal(lines)
    individual = individual_subtotal(lines)
    shipping = shipping_amount(individual)
    tax = tax_amount(individual, shipping)

    return CartTotals(
        kit_subtotal=kits,
        individual_subtotal=individual,
        shipping_amount=shipping,
        tax_amount=tax,
        charge_total=individual + shipping + tax,
    )


def calculate_store_totals(groups: Dict[str, Iterable[CartLine]]) -> CartTotals:
    """
    Sum of per-store totals. Shipping and tax are charged once per store
    order, so this is what a multi-store checkout actually bills.
    """
    result = EMPTY_TOTALS
    for lines in groups.values():
        result = result + calculate_totals(lines)
    return result
