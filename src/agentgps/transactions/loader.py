"""Load transaction, profile and agent snapshots from JSON files."""

import json
import logging
import re
from pathlib import Path
from typing import Any, Callable, Dict, List, TypeVar, Union

from .models import AgentRecord, CommissionProfile, Transaction, TransactionType
from .normalize import to_amount, to_date

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _snake_keys(record: Dict[str, Any]) -> Dict[str, Any]:
    return {_CAMEL_BOUNDARY.sub("_", key).lower(): value for key, value in record.items()}


def transaction_from_dict(data: Dict[str, Any]) -> Transaction:
    """Build a Transaction from a camelCase or snake_case record."""
    d = _snake_keys(data)
    acceptance_date = to_date(d.get("acceptance_date"))
    if acceptance_date is None:
        raise ValueError("acceptance_date is required")
    return Transaction(
        id=str(d["id"]),
        user_id=str(d["user_id"]),
        acceptance_date=acceptance_date,
        sale_price=to_amount(d.get("sale_price")),
        commission_rate=to_amount(d.get("commission_rate")),
        type=TransactionType(d.get("type") or TransactionType.BUYER_SALE.value),
        address=d.get("address") or "",
        team_id=d.get("team_id"),
        market_center_id=d.get("market_center_id"),
        coach_id=d.get("coach_id"),
        conditions_date=to_date(d.get("conditions_date")),
        close_date=to_date(d.get("close_date")),
        expiry_date=to_date(d.get("expiry_date")),
    )


def profile_from_dict(data: Dict[str, Any]) -> CommissionProfile:
    """Build a CommissionProfile from a camelCase or snake_case record."""
    d = _snake_keys(data)
    anniversary = to_date(d.get("cap_anniversary_date"))
    if anniversary is None:
        raise ValueError("cap_anniversary_date is required")
    return CommissionProfile(
        id=str(d["id"]),
        commission_split=to_amount(d.get("commission_split")),
        commission_cap=to_amount(d.get("commission_cap")),
        post_cap_transaction_fee=to_amount(d.get("post_cap_transaction_fee")),
        royalty_fee=to_amount(d.get("royalty_fee")),
        royalty_fee_cap=to_amount(d.get("royalty_fee_cap")),
        cap_anniversary_date=anniversary,
        market_center_id=d.get("market_center_id"),
    )


def agent_from_dict(data: Dict[str, Any]) -> AgentRecord:
    d = _snake_keys(data)
    return AgentRecord(
        id=str(d["id"]),
        name=d.get("name") or "",
        team_id=d.get("team_id"),
        market_center_id=d.get("market_center_id"),
    )


def _load_records(
    path: Union[str, Path],
    collection: str,
    build: Callable[[Dict[str, Any]], T],
) -> List[T]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"No {collection} file at {path}")

    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if isinstance(data, dict):
        if collection in data:
            records = data[collection]
        elif "id" in data:
            # A single record, e.g. one agent's commission profile
            records = [data]
        else:
            raise ValueError(f"Expected a list of {collection} in {path}")
    else:
        records = data
    if not isinstance(records, list):
        raise ValueError(f"Expected a list of {collection} in {path}")

    items = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise ValueError(f"Invalid {collection} record #{index} in {path}: not an object")
        try:
            items.append(build(record))
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid {collection} record #{index} in {path}: {e}") from e

    logger.info(f"Loaded {len(items)} {collection} from {path}")
    return items


def load_transactions(path: Union[str, Path]) -> List[Transaction]:
    return _load_records(path, "transactions", transaction_from_dict)


def load_profiles(path: Union[str, Path]) -> List[CommissionProfile]:
    return _load_records(path, "profiles", profile_from_dict)


def load_agents(path: Union[str, Path]) -> List[AgentRecord]:
    return _load_records(path, "agents", agent_from_dict)
