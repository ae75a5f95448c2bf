"""Commission waterfall engine for agent transactions."""

from .models import (
    AgentRecord,
    CoachProcessedTransaction,
    CommissionProfile,
    ProcessedTransaction,
    Transaction,
    TransactionType,
)
from .commission import (
    HST_RATE,
    UNKNOWN_AGENT,
    CapStatus,
    CommissionWaterfall,
    cap_status,
    cap_year_start,
    process_transactions_for_coach,
    process_transactions_for_user,
)
from .summary import TransactionSummary, filter_transactions, sort_transactions, summarize
from .exporter import TransactionExporter

__all__ = [
    "AgentRecord",
    "CoachProcessedTransaction",
    "CommissionProfile",
    "ProcessedTransaction",
    "Transaction",
    "TransactionType",
    "HST_RATE",
    "UNKNOWN_AGENT",
    "CapStatus",
    "CommissionWaterfall",
    "cap_status",
    "cap_year_start",
    "process_transactions_for_coach",
    "process_transactions_for_user",
    "TransactionSummary",
    "filter_transactions",
    "sort_transactions",
    "summarize",
    "TransactionExporter",
]
