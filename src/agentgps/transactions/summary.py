"""Totals, filtering and sorting over processed transactions."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Sequence

from .models import ProcessedTransaction

SORTABLE_FIELDS = (
    "acceptance_date",
    "address",
    "type",
    "sale_price",
    "commission_rate",
    "gci",
    "royalty_paid",
    "company_dollar_paid",
    "net_commission",
    "hst_on_gci",
    "agent_name",
)


@dataclass
class TransactionSummary:
    """Aggregate figures for a list of processed transactions."""
    count: int = 0
    total_volume: float = 0.0
    total_gci: float = 0.0
    total_net: float = 0.0
    total_company_dollar: float = 0.0
    total_royalty: float = 0.0
    total_hst: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "total_volume": round(self.total_volume, 2),
            "total_gci": round(self.total_gci, 2),
            "total_net": round(self.total_net, 2),
            "total_company_dollar": round(self.total_company_dollar, 2),
            "total_royalty": round(self.total_royalty, 2),
            "total_hst": round(self.total_hst, 2),
        }


def summarize(processed: Sequence[ProcessedTransaction]) -> TransactionSummary:
    """Add up GCI, net, company dollar, royalty and HST."""
    summary = TransactionSummary()
    for t in processed:
        summary.count += 1
        summary.total_volume += t.sale_price
        summary.total_gci += t.gci
        summary.total_net += t.net_commission
        summary.total_company_dollar += t.company_dollar_paid
        summary.total_royalty += t.royalty_paid
        summary.total_hst += t.hst_on_gci
    return summary


def filter_transactions(
    processed: Sequence[ProcessedTransaction],
    query: str = "",
) -> List[ProcessedTransaction]:
    """Keep transactions whose agent name or address contains ``query``."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(processed)
    return [
        t for t in processed
        if needle in getattr(t, "agent_name", "").lower() or needle in t.address.lower()
    ]


def _sort_value(transaction: ProcessedTransaction, key: str) -> Any:
    value = getattr(transaction, key, "")
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, str):
        return value.lower()
    return value


def sort_transactions(
    processed: Sequence[ProcessedTransaction],
    key: str = "acceptance_date",
    descending: bool = True,
) -> List[ProcessedTransaction]:
    """Sort by one of :data:`SORTABLE_FIELDS`."""
    if key not in SORTABLE_FIELDS:
        raise ValueError(f"Cannot sort by {key!r}. Must be one of: {', '.join(SORTABLE_FIELDS)}")
    return sorted(processed, key=lambda t: _sort_value(t, key), reverse=descending)
