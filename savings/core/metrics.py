from prometheus_client import Counter, Histogram

DEPOSITS_DISTRIBUTED_TOTAL = Counter(
    "savings_deposits_distributed_total",
    "Total number of deposits distributed across goals",
)

DEPOSIT_AMOUNT = Histogram(
    "savings_deposit_amount",
    "Amount of a single distributed deposit",
    buckets=[
        1_000,
        10_000,
        50_000,
        100_000,
        500_000,
        1_000_000,
        5_000_000,
    ],
)

ALLOCATION_FALLBACK_TOTAL = Counter(
    "savings_allocation_fallback_total",
    "Deposits handled by a fallback allocation policy",
    ["policy"],
)

DEDUCTIONS_TOTAL = Counter(
    "savings_deductions_total",
    "Total number of deductions applied to goals",
    ["mode"],
)

BILL_PAYMENTS_TOTAL = Counter(
    "savings_bill_payments_total",
    "Total number of simulated bill payments",
    ["category"],
)

INVESTMENTS_TOTAL = Counter(
    "savings_investments_total",
    "Total number of simulated investments",
    ["asset_type"],
)

DEMO_RESETS_TOTAL = Counter(
    "savings_demo_resets_total",
    "Total number of demo resets",
)
