"""Domain models - pure Python dataclasses representing finance snapshots and analyzer results"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


# ---------------------------------------------------------------------------
# Input snapshots (read-only, supplied by the persistence layer)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Expense:
    """Money out of an account"""

    id: str
    amount: float
    category: str
    date: date
    account_id: str = ""
    description: str = ""
    tags: tuple = ()
    goal_id: Optional[str] = None
    recurring_id: Optional[str] = None
    is_recurring: bool = False
    is_internal_transfer: bool = False


@dataclass(frozen=True)
class Income:
    """Money into an account"""

    id: str
    amount: float
    date: date
    account_id: str = ""
    source: str = ""
    category: str = "Income"
    tags: tuple = ()
    is_recurring: bool = False
    is_internal_transfer: bool = False


@dataclass(frozen=True)
class CancellationPolicy:
    """How a provider handles cancellation of a subscription"""

    policy: str = "end_of_cycle"  # "end_of_cycle" | "immediate" | "prorated"
    grace_days: int = 0


@dataclass(frozen=True)
class RecurringCommitment:
    """A rule that repeats an expense or income on a schedule"""

    id: str
    type: str  # "expense" or "income"
    amount: float
    frequency: str  # "daily" | "weekly" | "monthly" | "yearly" | "custom"
    start_date: date
    end_date: Optional[date] = None
    custom_interval_days: Optional[int] = None
    interval: int = 1
    day_of_month: Optional[int] = None
    nth_week: Optional[int] = None  # 1-4, or -1 for the last one in the month
    weekday: Optional[int] = None  # 0=Monday .. 6=Sunday
    kind: str = "other"  # "subscription" | "bill" | "income" | "other"
    description: str = ""
    category: str = ""
    status: str = "active"  # "active" | "cancellation_pending" | "cancelled"
    cancellation: Optional[CancellationPolicy] = None
    linked_liability_id: Optional[str] = None
    manual_usage_count: int = 0
    last_used_at: Optional[date] = None


@dataclass(frozen=True)
class Liability:
    """Amortizing loan or revolving credit line"""

    id: str
    name: str
    principal: float
    outstanding: float
    interest_rate: float  # nominal annual rate, in percent
    emi_amount: float = 0.0
    tenure_months: int = 0
    start_date: Optional[date] = None
    effective_rate: Optional[float] = None  # effective annual rate, as a fraction
    penalty_applied: bool = False
    min_payment: float = 0.0
    kind: str = "loan"  # "loan" | "credit_card" | ...
    status: str = "active"  # "active" | "closed"

    @property
    def annual_rate(self) -> float:
        """Effective annual rate when known, nominal otherwise (as a fraction)"""
        return self.effective_rate or self.interest_rate / 100


@dataclass(frozen=True)
class Goal:
    """Savings target with a deadline"""

    id: str
    name: str
    target_amount: float
    current_amount: float = 0.0
    target_date: Optional[date] = None
    monthly_contribution: Optional[float] = None
    is_discretionary: bool = False
    status: str = "active"  # "active" | "completed" | "leaking"
    tags: tuple = ()


@dataclass(frozen=True)
class Account:
    """Where money is held"""

    id: str
    name: str
    type: str  # "bank" | "cash" | "credit_card" | "investment"
    balance: float


@dataclass(frozen=True)
class Debt:
    """Personal IOU with a friend or relative"""

    id: str
    person_name: str
    amount: float
    type: str  # "borrowed" or "lent"
    status: str = "pending"  # "pending" or "settled"


@dataclass(frozen=True)
class Investment:
    """Market or fixed-income holding"""

    id: str
    name: str
    type: str  # "stock" | "mutual_fund" | "sip" | "crypto" | "physical_asset" | ...
    quantity: float
    buy_price: float
    current_price: Optional[float] = None
    expected_return: Optional[float] = None  # annual, as a fraction

    @property
    def market_value(self) -> float:
        return self.quantity * (self.current_price or self.buy_price)


@dataclass(frozen=True)
class FinancialSnapshot:
    """Everything the engine reads for one computation"""

    accounts: List[Account] = field(default_factory=list)
    expenses: List[Expense] = field(default_factory=list)
    incomes: List[Income] = field(default_factory=list)
    debts: List[Debt] = field(default_factory=list)
    goals: List[Goal] = field(default_factory=list)
    liabilities: List[Liability] = field(default_factory=list)
    recurring: List[RecurringCommitment] = field(default_factory=list)
    investments: List[Investment] = field(default_factory=list)
    monthly_income: float = 0.0
    monthly_expenses: float = 0.0
    health_score: Optional[float] = None
    currency: str = "INR"
    today: Optional[date] = None

    @property
    def total_balance(self) -> float:
        """Spendable balance across bank and cash accounts"""
        return sum(a.balance for a in self.accounts if a.type in ("bank", "cash"))


# ---------------------------------------------------------------------------
# Analyzer results (plain data consumed by presentation code)
# ---------------------------------------------------------------------------


@dataclass
class Occurrence:
    """One projected date of a recurring rule"""

    date: date
    index: int  # 1-based position in the rule's full series


@dataclass
class LoanDetails:
    emi: float
    total_interest: float
    total_payment: float
    outstanding: float
    closure_date: Optional[date] = None


@dataclass
class InvestmentDetails:
    monthly_yield: float
    total_returns: float
    maturity_value: float


@dataclass
class ForecastResult:
    """Projected balance after a horizon"""

    days: int
    projected_balance: float
    fixed_commitments: float
    daily_burn_total: float
    expected_income: float
    risk_level: str  # "low" | "medium" | "high"


@dataclass
class StressFactors:
    """Per-factor scores, each 0-100"""

    emi_load: int
    commitment_ratio: int
    volatility: int
    cash_runway: int
    goal_drift: int


@dataclass
class StressScoreResult:
    score: int
    factors: StressFactors
    level: str  # "low" | "moderate" | "high" | "critical"
    message: str


@dataclass
class IncreaseSavings:
    new_monthly: float
    extra_needed: float


@dataclass
class ExtendDeadline:
    new_date: date
    months_more: int


@dataclass
class ReduceTarget:
    new_target: float
    reduction: float


@dataclass
class GoalAdjustments:
    increase_savings: IncreaseSavings
    extend_deadline: ExtendDeadline
    reduce_target: ReduceTarget


@dataclass
class GoalAnalysisResult:
    goal_id: str
    required_rate: float
    actual_rate: float
    drift: float  # actual / required
    is_behind: bool
    months_left: float
    adjustments: GoalAdjustments


@dataclass
class CancellationStrategy:
    optimal_date: date
    reason: str
    urgency: str  # "low" | "medium" | "high"
    savings: float
    message: str
    action_type: str  # "wait" | "cancel_now" | "monitor"
    refund_estimate: Optional[float] = None


@dataclass
class SubscriptionROI:
    cost_per_use: float
    total_usage: int
    passive_usage: int
    active_usage: int
    is_poor_roi: bool
    frequency_per_month: int


@dataclass
class Allocation:
    """Split of monthly surplus between the directive and everything else"""

    survival: int = 80
    leisure: int = 20


@dataclass
class TradeOff:
    time_saved_months: int
    potential_growth_amount: float
    comparison_message: str


@dataclass
class RealReturn:
    value: float
    message: str


@dataclass
class Trigger:
    """Advisory condition detected independently of the primary directive"""

    id: str
    type: str  # "breach" | "windfall" | "spike" | "closer" | "milestone"
    title: str
    message: str
    action_label: str
    severity: str  # "critical" | "warning" | "info" | "success"
    explanation: Optional[str] = None


@dataclass
class ArchitectAnalysis:
    priority: int
    tier: str
    title: str
    message: str
    allocation: Allocation
    next_milestone: str
    trade_off: Optional[TradeOff] = None
    real_return: Optional[RealReturn] = None
    triggers: List[Trigger] = field(default_factory=list)
    state: str = "normal"  # "leakage" | "inversion" | "normal"
    pivot_actions: List[str] = field(default_factory=list)


@dataclass
class SubscriptionAdvice:
    """Cancellation strategy and ROI for one subscription"""

    subscription_id: str
    strategy: Optional[CancellationStrategy]
    roi: SubscriptionROI


@dataclass
class AdvisoryBundle:
    """Every analyzer's output for one snapshot"""

    forecast: ForecastResult
    stress: StressScoreResult
    goals: List[GoalAnalysisResult]
    subscriptions: List[SubscriptionAdvice]
    architect: ArchitectAnalysis
