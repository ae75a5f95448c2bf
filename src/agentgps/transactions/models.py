"""Transaction and commission profile models."""

from dataclasses import dataclass, field, fields
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional


class TransactionType(Enum):
    """Kind of deal. Informational only."""
    LISTING_SALE = "Listing Sale"
    BUYER_SALE = "Buyer Sale"
    LEASE = "Lease"


def _serialize(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


@dataclass(frozen=True)
class Transaction:
    """A closed or accepted deal logged by an agent."""

    id: str
    user_id: str
    acceptance_date: date
    sale_price: float
    commission_rate: float  # Percentage, e.g. 2.5 for 2.5%
    type: TransactionType = TransactionType.BUYER_SALE
    address: str = ""

    # Scoping
    team_id: Optional[str] = None
    market_center_id: Optional[str] = None
    coach_id: Optional[str] = None

    # Milestones
    conditions_date: Optional[date] = None
    close_date: Optional[date] = None
    expiry_date: Optional[date] = None

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: _serialize(getattr(self, f.name)) for f in fields(self)}


@dataclass(frozen=True)
class CommissionProfile:
    """An agent's commission plan. ``id`` is the owning user's id."""

    id: str
    commission_split: float  # Agent keeps this percentage until capped
    commission_cap: float
    post_cap_transaction_fee: float
    royalty_fee: float  # Percentage of GCI
    royalty_fee_cap: float
    cap_anniversary_date: date  # Only month/day matter
    market_center_id: Optional[str] = None

    @classmethod
    def default(cls, user_id: str, today: Optional[date] = None) -> "CommissionProfile":
        """Profile pre-filled for agents who have not configured one yet."""
        return cls(
            id=user_id,
            commission_split=80.0,
            commission_cap=16000.0,
            post_cap_transaction_fee=250.0,
            royalty_fee=6.0,
            royalty_fee_cap=3000.0,
            cap_anniversary_date=today or date.today(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: _serialize(getattr(self, f.name)) for f in fields(self)}


@dataclass(frozen=True)
class AgentRecord:
    """Minimal view of a team member, used to label coach views."""
    id: str
    name: str = ""
    team_id: Optional[str] = None
    market_center_id: Optional[str] = None


@dataclass(frozen=True)
class ProcessedTransaction(Transaction):
    """A transaction with its commission waterfall figures. Never persisted."""

    gci: float = 0.0
    royalty_paid: float = 0.0
    company_dollar_paid: float = 0.0
    net_commission: float = 0.0
    hst_on_gci: float = 0.0

    @classmethod
    def from_transaction(cls, transaction: Transaction, **figures: Any):
        base = {f.name: getattr(transaction, f.name) for f in fields(Transaction)}
        return cls(**base, **figures)


@dataclass(frozen=True)
class CoachProcessedTransaction(ProcessedTransaction):
    """Processed transaction labelled with the owning agent's name."""

    agent_name: str = field(default="")

    @classmethod
    def from_processed(cls, processed: ProcessedTransaction, agent_name: str):
        base = {f.name: getattr(processed, f.name) for f in fields(ProcessedTransaction)}
        return cls(**base, agent_name=agent_name)
