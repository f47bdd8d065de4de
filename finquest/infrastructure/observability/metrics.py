"""Prometheus metrics for monitoring quiz outcomes, coin issuance and ledger contention"""

from prometheus_client import Counter, Histogram

# Progression metrics
quiz_submission_counter = Counter(
    "finquest_quiz_submissions_total",
    "Quiz submissions recorded",
    ["outcome"],  # new_completion | passed_repeat | failed
)

coins_awarded_counter = Counter(
    "finquest_coins_awarded_total",
    "Coins credited to users",
    ["source"],  # quiz | simulation
)

ledger_conflict_counter = Counter(
    "finquest_ledger_conflicts_total",
    "Optimistic progress writes that lost a race and were retried",
)

# Simulator metrics
loan_calculation_counter = Counter(
    "finquest_loan_calculations_total",
    "Amortization calculations served",
    ["kind"],  # single | comparison | saved
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_quiz_outcome(passed: bool, is_new_completion: bool, coins_earned: int) -> None:
    """Record quiz metrics for monitoring pass rates and coin issuance"""
    if is_new_completion:
        outcome = "new_completion"
    elif passed:
        outcome = "passed_repeat"
    else:
        outcome = "failed"
    quiz_submission_counter.labels(outcome=outcome).inc()

    if coins_earned > 0:
        coins_awarded_counter.labels(source="quiz").inc(coins_earned)


def record_simulation_bonus(bonus: int) -> None:
    """Record coins paid out for a saved simulator run"""
    loan_calculation_counter.labels(kind="saved").inc()
    if bonus > 0:
        coins_awarded_counter.labels(source="simulation").inc(bonus)
