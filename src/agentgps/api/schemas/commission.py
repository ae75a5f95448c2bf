"""Pydantic models for commission processing requests."""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ...transactions.models import AgentRecord, CommissionProfile, Transaction, TransactionType
from ...transactions.normalize import to_date


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TransactionIn(_CamelModel):
    id: str
    user_id: str
    acceptance_date: date
    sale_price: float = Field(..., gt=0)
    commission_rate: float = Field(..., ge=0, le=100)
    type: TransactionType = TransactionType.BUYER_SALE
    address: str = ""
    team_id: Optional[str] = None
    market_center_id: Optional[str] = None
    coach_id: Optional[str] = None
    conditions_date: Optional[date] = None
    close_date: Optional[date] = None
    expiry_date: Optional[date] = None

    @field_validator(
        "acceptance_date", "conditions_date", "close_date", "expiry_date", mode="before"
    )
    @classmethod
    def _date_only(cls, value):
        return to_date(value)

    def to_model(self) -> Transaction:
        return Transaction(**self.model_dump())


class CommissionProfileIn(_CamelModel):
    id: str
    commission_split: float = Field(..., ge=0, le=100)
    commission_cap: float = Field(..., ge=0)
    post_cap_transaction_fee: float = Field(0, ge=0)
    royalty_fee: float = Field(0, ge=0, le=100)
    royalty_fee_cap: float = Field(0, ge=0)
    cap_anniversary_date: date
    market_center_id: Optional[str] = None

    @field_validator("cap_anniversary_date", mode="before")
    @classmethod
    def _date_only(cls, value):
        return to_date(value)

    def to_model(self) -> CommissionProfile:
        return CommissionProfile(**self.model_dump())


class AgentIn(_CamelModel):
    id: str
    name: str = ""
    team_id: Optional[str] = None
    market_center_id: Optional[str] = None

    def to_model(self) -> AgentRecord:
        return AgentRecord(**self.model_dump())


class AgentCommissionRequest(_CamelModel):
    transactions: List[TransactionIn] = Field(default_factory=list)
    profile: Optional[CommissionProfileIn] = None
    as_of: Optional[date] = Field(
        None, description="Reference date for the current cap year. Defaults to today."
    )


class CoachCommissionRequest(_CamelModel):
    transactions: List[TransactionIn] = Field(default_factory=list)
    profiles: List[CommissionProfileIn] = Field(default_factory=list)
    agents: List[AgentIn] = Field(default_factory=list)
    as_of: Optional[date] = None
    query: str = Field("", description="Case-insensitive match on agent name or address")
    sort_by: str = "acceptance_date"
    descending: bool = True


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    detail: str
