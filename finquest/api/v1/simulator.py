"""/v1/simulator - loan EMI calculation, offer comparison and saved simulator runs"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from finquest.api.v1.schemas import (
    CompareRequest,
    CompareResponse,
    ComparedOfferSchema,
    LoanRequest,
    LoanResponse,
    ScheduleEntrySchema,
    SimulationHistoryResponse,
    SimulationRequest,
    SimulationResponse,
    SimulationSchema,
)
from finquest.api.dependencies import authenticated_user, get_clock, get_ledger, get_request_id
from finquest.api.errors import to_http_error
from finquest.infrastructure.database.session import get_db
from finquest.infrastructure.database.repositories import SimulationRepository
from finquest.infrastructure.observability.metrics import loan_calculation_counter, record_simulation_bonus
from finquest.infrastructure.observability.logging import log_simulation_run
from finquest.domain.amortization import calculate_loan
from finquest.utils.rounding import round_half_up
from finquest.domain.comparison import compare_offers
from finquest.domain.exceptions import DomainException
from finquest.domain.models import LoanOffer, LoanSimulation
from finquest.domain.progression import ProgressionLedger
from finquest.utils.clock import Clock

router = APIRouter()


def simulation_schema(simulation: LoanSimulation) -> SimulationSchema:
    return SimulationSchema(
        simulation_id=simulation.simulation_id or "",
        principal=simulation.principal,
        annual_rate_percent=simulation.annual_rate_percent,
        term_months=simulation.term_months,
        installment_amount=simulation.installment_amount,
        total_paid=simulation.total_paid,
        total_interest=simulation.total_interest,
        simulation_type=simulation.simulation_type,
        created_at=simulation.created_at.isoformat() if simulation.created_at else "",
    )


@router.post("/simulator/calculate", response_model=LoanResponse)
def calculate(request_body: LoanRequest, request: Request):
    """
    EMI, total cost and first-year schedule for a loan.

    Summary amounts are rounded to whole currency units.
    """
    try:
        result = calculate_loan(
            request_body.principal,
            request_body.annual_rate_percent,
            request_body.term_months,
        )
    except DomainException as e:
        raise to_http_error(e, get_request_id(request))

    loan_calculation_counter.labels(kind="single").inc()

    return LoanResponse(
        installment_amount=round_half_up(result.installment_amount),
        total_paid=round_half_up(result.total_paid),
        total_interest=round_half_up(result.total_interest),
        monthly_rate_percent=result.monthly_rate_percent,
        schedule=[
            ScheduleEntrySchema(
                period_index=entry.period_index,
                installment=entry.installment,
                principal_portion=entry.principal_portion,
                interest_portion=entry.interest_portion,
                remaining_balance=entry.remaining_balance,
            )
            for entry in result.schedule
        ],
    )


@router.post("/simulator/compare", response_model=CompareResponse)
def compare(request_body: CompareRequest, request: Request):
    """Price each offer and report its savings against the most expensive one"""
    offers = [
        LoanOffer(label=o.label, annual_rate_percent=o.annual_rate_percent, term_months=o.term_months)
        for o in request_body.offers
    ]
    try:
        compared = compare_offers(request_body.principal, offers)
    except DomainException as e:
        raise to_http_error(e, get_request_id(request))

    loan_calculation_counter.labels(kind="comparison").inc()

    return CompareResponse(
        principal=request_body.principal,
        offers=[
            ComparedOfferSchema(
                label=c.label,
                annual_rate_percent=c.annual_rate_percent,
                term_months=c.term_months,
                installment_amount=round_half_up(c.installment_amount),
                total_paid=round_half_up(c.total_paid),
                total_interest=round_half_up(c.total_interest),
                savings_vs_worst=round_half_up(c.savings_vs_worst),
            )
            for c in compared
        ],
    )


@router.post("/simulator/simulations", response_model=SimulationResponse)
def save_simulation(
    request_body: SimulationRequest,
    request: Request,
    user_id: str = Depends(authenticated_user),
    db: Session = Depends(get_db),
    ledger: ProgressionLedger = Depends(get_ledger),
    clock: Clock = Depends(get_clock),
):
    """
    Save a simulator run and pay the simulator bonus.

    Flow:
    1. Recompute the loan figures server-side
    2. Persist the run
    3. Credit the fixed bonus through the ledger
    4. Commit both in one transaction
    """
    request_id = get_request_id(request)

    try:
        result = calculate_loan(
            request_body.principal,
            request_body.annual_rate_percent,
            request_body.term_months,
        )

        simulation = SimulationRepository(db).create_simulation(
            LoanSimulation(
                user_id=user_id,
                principal=request_body.principal,
                annual_rate_percent=request_body.annual_rate_percent,
                term_months=request_body.term_months,
                installment_amount=round_half_up(result.installment_amount),
                total_paid=round_half_up(result.total_paid),
                total_interest=round_half_up(result.total_interest),
                simulation_type=request_body.simulation_type,
                created_at=clock.now(),
            )
        )

        progress = ledger.record_simulation_run(user_id)
        db.commit()

    except DomainException as e:
        db.rollback()
        raise to_http_error(e, request_id)

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    coins_awarded = ledger.simulation_bonus
    record_simulation_bonus(coins_awarded)
    log_simulation_run(request_id, user_id, request_body.simulation_type, progress.total_coins)

    return SimulationResponse(
        simulation=simulation_schema(simulation),
        coins_awarded=coins_awarded,
        total_coins=progress.total_coins,
        level=progress.level,
    )


@router.get("/simulator/simulations", response_model=SimulationHistoryResponse)
def list_simulations(
    request: Request,
    user_id: str = Depends(authenticated_user),
    db: Session = Depends(get_db),
):
    """Ten most recent saved runs for the caller, newest first"""
    try:
        simulations = SimulationRepository(db).get_simulations_by_user(user_id, limit=10)
    except DomainException as e:
        raise to_http_error(e, get_request_id(request))

    return SimulationHistoryResponse(
        user_id=user_id,
        simulations=[simulation_schema(s) for s in simulations],
    )
