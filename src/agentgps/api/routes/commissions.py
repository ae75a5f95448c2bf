"""Commission waterfall routes for agent and coach views."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ...core.config import settings
from ...transactions import (
    cap_status,
    filter_transactions,
    process_transactions_for_coach,
    process_transactions_for_user,
    sort_transactions,
    summarize,
)
from ..schemas.commission import AgentCommissionRequest, CoachCommissionRequest, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/commissions", tags=["commissions"])


@router.post("/agent")
async def process_agent(payload: AgentCommissionRequest):
    """Process a single agent's transactions against their profile."""
    transactions = [t.to_model() for t in payload.transactions]
    profile = payload.profile.to_model() if payload.profile else None

    processed = process_transactions_for_user(
        transactions, profile, today=payload.as_of, hst_rate=settings.hst_rate
    )
    status = cap_status(transactions, profile, today=payload.as_of) if profile else None

    return {
        "transactions": [t.to_dict() for t in processed],
        "summary": summarize(processed).to_dict(),
        "cap_status": status.to_dict() if status else None,
    }


@router.post("/coach")
async def process_coach(payload: CoachCommissionRequest):
    """Process transactions for every agent a coach or admin can see."""
    processed = process_transactions_for_coach(
        [t.to_model() for t in payload.transactions],
        [p.to_model() for p in payload.profiles],
        [a.to_model() for a in payload.agents],
        today=payload.as_of,
        hst_rate=settings.hst_rate,
        unknown_agent=settings.unknown_agent_name,
    )

    try:
        visible = sort_transactions(
            filter_transactions(processed, payload.query),
            key=payload.sort_by,
            descending=payload.descending,
        )
    except ValueError as e:
        logger.warning(f"Rejected coach request: {e}")
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error="invalid_sort", detail=str(e)).model_dump(),
        )

    return {
        "transactions": [t.to_dict() for t in visible],
        "summary": summarize(visible).to_dict(),
    }
