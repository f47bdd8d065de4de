"""Side-by-side comparison of loan offers for the same principal"""

from typing import List, Sequence
from finquest.domain.amortization import calculate_loan
from finquest.domain.models import ComparedOffer, LoanOffer


def compare_offers(principal: float, offers: Sequence[LoanOffer]) -> List[ComparedOffer]:
    """
    Price every offer and report how much each saves against the most expensive one.

    Savings are relative, so they need every offer's total first: the second
    pass runs only after all totals are known. Output order matches input order.
    """
    priced = [
        (offer, calculate_loan(principal, offer.annual_rate_percent, offer.term_months))
        for offer in offers
    ]
    if not priced:
        return []

    worst_total = max(result.total_paid for _, result in priced)

    return [
        ComparedOffer(
            label=offer.label,
            annual_rate_percent=offer.annual_rate_percent,
            term_months=offer.term_months,
            installment_amount=result.installment_amount,
            total_paid=result.total_paid,
            total_interest=result.total_interest,
            savings_vs_worst=worst_total - result.total_paid,
        )
        for offer, result in priced
    ]
