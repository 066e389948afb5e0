"""
Invoice pricing rules.

Computes the customer's charge (services + delivery + sales tax) and the
George's Music charge, where the store's markup is applied to the shop's
taxed price and already includes tax.
"""

from typing import Iterable
from loguru import logger
from pydantic import BaseModel


class PricingConfig(BaseModel):
    """Pricing parameters (loaded from environment)"""
    tax_rate: float = 0.06
    georges_markup: float = 1.54
    delivery_rate_per_mile: float = 0.85


class InvoiceTotals(BaseModel):
    services_total: float
    subtotal: float
    delivery: float
    tax: float
    total: float
    your_tax: float
    your_charge_with_tax: float
    georges_subtotal: float
    georges_tax: float
    georges_total: float


def _cents(value: float) -> float:
    return round(value, 2)


class InvoicePricing:
    def __init__(self, config: PricingConfig = None):
        self.config = config or PricingConfig()

    def delivery_fee_for_miles(self, miles: float) -> float:
        """Round-trip fee for a one-way distance, charged on whole miles."""
        whole_miles = int(miles + 0.5)
        return _cents(whole_miles * 2 * self.config.delivery_rate_per_mile)

    def calculate(
        self,
        materials: Iterable,
        delivery_fee: float = 0.0,
        is_georges_music: bool = False,
        no_delivery_fee: bool = False,
    ) -> InvoiceTotals:
        """
        Calculate invoice totals.

        Args:
            materials: Rows with ``quantity`` and ``unit_cost`` attributes
            delivery_fee: Fee from the delivery estimate
            is_georges_music: Repair came in through George's Music (no delivery)
            no_delivery_fee: Delivery fee waived

        Returns:
            InvoiceTotals rounded to cents
        """
        services_total = sum(m.quantity * m.unit_cost for m in materials)
        subtotal = services_total

        delivery = 0.0 if is_georges_music or no_delivery_fee else (delivery_fee or 0.0)
        subtotal_with_delivery = subtotal + delivery
        tax = subtotal_with_delivery * self.config.tax_rate
        total = subtotal_with_delivery + tax

        # George's markup applies after tax on the shop's own charge
        your_tax = subtotal * self.config.tax_rate
        your_charge_with_tax = subtotal + your_tax
        georges_subtotal = your_charge_with_tax * self.config.georges_markup

        totals = InvoiceTotals(
            services_total=_cents(services_total),
            subtotal=_cents(subtotal),
            delivery=_cents(delivery),
            tax=_cents(tax),
            total=_cents(total),
            your_tax=_cents(your_tax),
            your_charge_with_tax=_cents(your_charge_with_tax),
            georges_subtotal=_cents(georges_subtotal),
            georges_tax=0.0,
            georges_total=_cents(georges_subtotal),
        )
        logger.debug("Invoice totals calculated", total=totals.total, georges_total=totals.georges_total)
        return totals


def create_pricing_rules(
    tax_rate: float = None,
    georges_markup: float = None,
    delivery_rate_per_mile: float = None,
) -> InvoicePricing:
    """
    Factory function to create pricing rules with optional overrides.

    Uses environment variables as defaults.
    """
    from ..core.config import settings

    config = PricingConfig(
        tax_rate=tax_rate if tax_rate is not None else settings.tax_rate,
        georges_markup=georges_markup if georges_markup is not None else settings.georges_markup,
        delivery_rate_per_mile=(
            delivery_rate_per_mile if delivery_rate_per_mile is not None else settings.delivery_rate_per_mile
        ),
    )
    return InvoicePricing(config)
