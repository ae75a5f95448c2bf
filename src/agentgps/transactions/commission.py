"""Commission waterfall with annual royalty and company-dollar caps."""

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .models import (
    AgentRecord,
    CoachProcessedTransaction,
    CommissionProfile,
    ProcessedTransaction,
    Transaction,
)
from .normalize import gross_commission_income, is_nan, percent_of, rebase_to_year

logger = logging.getLogger(__name__)

HST_RATE = 0.13  # Ontario HST, charged on GCI
UNKNOWN_AGENT = "Unknown Agent"

ProfileLookup = Union[Mapping[str, CommissionProfile], Iterable[CommissionProfile]]
AgentLookup = Union[Mapping[str, str], Iterable[AgentRecord]]


def cap_year_start(anniversary: date, today: date) -> date:
    """First day of the cap year that contains ``today``."""
    start = rebase_to_year(anniversary, today.year)
    if today < start:
        start = rebase_to_year(anniversary, today.year - 1)
    return start


def cap_year_end(anniversary: date, start: date) -> date:
    """First day of the cap year after the one beginning on ``start``."""
    return rebase_to_year(anniversary, start.year + 1)


def partition_by_cap_year(
    transactions: Iterable[Transaction],
    start: date,
) -> Tuple[List[Transaction], List[Transaction]]:
    """Split into (current cap year, earlier), both oldest first."""
    ordered = sorted(transactions, key=lambda t: t.acceptance_date)
    current = [t for t in ordered if t.acceptance_date >= start]
    earlier = [t for t in ordered if t.acceptance_date < start]
    return current, earlier


def _capped(potential: float, remaining: float) -> float:
    if is_nan(potential) or is_nan(remaining):
        return math.nan
    return min(potential, max(0.0, remaining))


def _fully_net(transaction: Transaction, hst_rate: float) -> ProcessedTransaction:
    gci = gross_commission_income(transaction.sale_price, transaction.commission_rate)
    return ProcessedTransaction.from_transaction(
        transaction,
        gci=gci,
        royalty_paid=0.0,
        company_dollar_paid=0.0,
        net_commission=gci,
        hst_on_gci=gci * hst_rate,
    )


def _newest_first(items: List[ProcessedTransaction]) -> List[ProcessedTransaction]:
    return sorted(items, key=lambda t: t.acceptance_date, reverse=True)


class CommissionWaterfall:
    """Running royalty and company-dollar totals for one agent's cap year.

    Feed transactions oldest first; each call to :meth:`apply` consumes cap
    headroom for the deals that follow.
    """

    def __init__(self, profile: CommissionProfile, hst_rate: float = HST_RATE):
        self.profile = profile
        self.hst_rate = hst_rate
        self.running_royalty: float = 0.0
        self.running_company_dollar: float = 0.0

    @property
    def is_capped(self) -> bool:
        return self.running_company_dollar >= self.profile.commission_cap

    def apply(self, transaction: Transaction) -> ProcessedTransaction:
        profile = self.profile
        gci = gross_commission_income(transaction.sale_price, transaction.commission_rate)

        potential_royalty = percent_of(gci, profile.royalty_fee)
        royalty = _capped(potential_royalty, profile.royalty_fee_cap - self.running_royalty)
        gci_after_royalty = gci - royalty

        already_capped = self.is_capped
        if already_capped:
            company_dollar = profile.post_cap_transaction_fee
        else:
            potential_company_dollar = gci_after_royalty * (1 - profile.commission_split / 100)
            company_dollar = _capped(
                potential_company_dollar,
                profile.commission_cap - self.running_company_dollar,
            )

        self.running_royalty += royalty
        self.running_company_dollar += company_dollar
        if self.is_capped and not already_capped:
            logger.debug(f"Agent {transaction.user_id} capped after transaction {transaction.id}")

        return ProcessedTransaction.from_transaction(
            transaction,
            gci=gci,
            royalty_paid=royalty,
            company_dollar_paid=company_dollar,
            net_commission=gci - royalty - company_dollar,
            hst_on_gci=gci * self.hst_rate,
        )


def process_transactions_for_user(
    transactions: Iterable[Transaction],
    profile: Optional[CommissionProfile],
    today: Optional[date] = None,
    hst_rate: float = HST_RATE,
) -> List[ProcessedTransaction]:
    """Run one agent's transactions through their commission waterfall.

    Without a profile every deal is reported fully net. With one, deals in
    the current cap year consume the royalty and commission caps in
    chronological order; deals from earlier cap years are reported fully net.

    Args:
        transactions: All raw transactions for a single agent.
        profile: The agent's commission profile, or None.
        today: Reference date that decides the current cap year.
        hst_rate: Tax rate applied to GCI.

    Returns:
        Processed transactions, newest first.
    """
    if profile is None:
        return _newest_first([_fully_net(t, hst_rate) for t in transactions])

    today = today or date.today()
    start = cap_year_start(profile.cap_anniversary_date, today)
    logger.debug(f"Cap year for profile {profile.id} starts {start.isoformat()}")

    current, earlier = partition_by_cap_year(transactions, start)

    waterfall = CommissionWaterfall(profile, hst_rate)
    processed = [waterfall.apply(t) for t in current]
    processed.extend(_fully_net(t, hst_rate) for t in earlier)

    return _newest_first(processed)


@dataclass
class CapStatus:
    """Progress toward an agent's caps within the current cap year."""
    cap_year_start: date
    cap_year_end: date
    royalty_paid: float
    royalty_fee_cap: float
    company_dollar_paid: float
    commission_cap: float
    transactions: int

    @property
    def royalty_remaining(self) -> float:
        return max(0.0, self.royalty_fee_cap - self.royalty_paid)

    @property
    def commission_remaining(self) -> float:
        return max(0.0, self.commission_cap - self.company_dollar_paid)

    @property
    def is_capped(self) -> bool:
        return self.company_dollar_paid >= self.commission_cap

    def to_dict(self) -> Dict:
        return {
            "cap_year_start": self.cap_year_start.isoformat(),
            "cap_year_end": self.cap_year_end.isoformat(),
            "royalty_paid": round(self.royalty_paid, 2),
            "royalty_fee_cap": self.royalty_fee_cap,
            "royalty_remaining": round(self.royalty_remaining, 2),
            "company_dollar_paid": round(self.company_dollar_paid, 2),
            "commission_cap": self.commission_cap,
            "commission_remaining": round(self.commission_remaining, 2),
            "is_capped": self.is_capped,
            "transactions": self.transactions,
        }


def cap_status(
    transactions: Iterable[Transaction],
    profile: CommissionProfile,
    today: Optional[date] = None,
) -> CapStatus:
    """Summarize how much of each cap the current cap year has consumed."""
    today = today or date.today()
    start = cap_year_start(profile.cap_anniversary_date, today)
    current, _ = partition_by_cap_year(transactions, start)

    waterfall = CommissionWaterfall(profile)
    for transaction in current:
        waterfall.apply(transaction)

    return CapStatus(
        cap_year_start=start,
        cap_year_end=cap_year_end(profile.cap_anniversary_date, start),
        royalty_paid=waterfall.running_royalty,
        royalty_fee_cap=profile.royalty_fee_cap,
        company_dollar_paid=waterfall.running_company_dollar,
        commission_cap=profile.commission_cap,
        transactions=len(current),
    )


def _profiles_by_user(profiles: ProfileLookup) -> Dict[str, CommissionProfile]:
    if isinstance(profiles, Mapping):
        return dict(profiles)
    return {p.id: p for p in profiles}


def _names_by_user(agents: AgentLookup) -> Dict[str, str]:
    if isinstance(agents, Mapping):
        return dict(agents)
    return {a.id: a.name for a in agents}


def group_by_user(transactions: Iterable[Transaction]) -> Dict[str, List[Transaction]]:
    grouped: Dict[str, List[Transaction]] = {}
    for transaction in transactions:
        grouped.setdefault(transaction.user_id, []).append(transaction)
    return grouped


def process_transactions_for_coach(
    transactions: Iterable[Transaction],
    profiles: ProfileLookup,
    agents: AgentLookup,
    today: Optional[date] = None,
    hst_rate: float = HST_RATE,
    unknown_agent: str = UNKNOWN_AGENT,
) -> List[CoachProcessedTransaction]:
    """Process transactions for many agents at once (coach and admin views).

    Each agent's caps accumulate independently. Agents without a profile get
    fully-net figures; agents without a resolvable name are labelled
    ``unknown_agent``.

    Returns:
        Every processed transaction labelled with its agent, newest first.
    """
    profiles_map = _profiles_by_user(profiles)
    names = _names_by_user(agents)
    today = today or date.today()

    all_processed: List[CoachProcessedTransaction] = []
    for user_id, user_transactions in group_by_user(transactions).items():
        agent_name = names.get(user_id) or unknown_agent
        processed = process_transactions_for_user(
            user_transactions, profiles_map.get(user_id), today=today, hst_rate=hst_rate
        )
        all_processed.extend(
            CoachProcessedTransaction.from_processed(t, agent_name) for t in processed
        )

    logger.debug(f"Processed {len(all_processed)} transactions for {len(profiles_map)} profiles")
    return _newest_first(all_processed)
