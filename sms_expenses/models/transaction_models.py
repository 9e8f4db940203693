from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


TransactionType = Literal["debited", "credited"]
Direction = Literal["all", "credited", "debited"]


class ScreenPhase(str, Enum):
    """Where the expenses screen is in its permission/fetch lifecycle"""
    INIT = "init"
    REQUESTING_PERMISSION = "requesting_permission"
    PERMISSION_DENIED = "permission_denied"
    LOADING = "loading"
    LOADED = "loaded"


class RawMessage(BaseModel):
    """One inbox record as produced by the SMS-access capability.

    Only the fields used for parsing are kept; anything else the device
    reports (thread id, read flag, service center...) is ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., alias="_id")
    body: str
    date_sent: int = Field(..., description="Epoch milliseconds")
    address: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        # Android reports _id as an integer column
        if isinstance(value, int):
            return str(value)
        return value


class ParsedTransaction(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    body: str
    amount: str
    date: str
    time_ago: str
    type: TransactionType
    sender: str


class TransactionCard(BaseModel):
    """What a single row of the expenses list shows."""

    id: str
    initial: str
    sender: str
    body: str
    date: str
    time_ago: str
    type: TransactionType
    amount_label: str
    color: str


class ScreenSnapshot(BaseModel):
    phase: ScreenPhase
    permission_granted: Optional[bool] = None
    loading: bool
    direction: Direction
    search: str
    total_count: int
    visible_count: int
    fetch_error: Optional[str] = None
    fetched_at: Optional[datetime] = None
    cards: list[TransactionCard] = Field(default_factory=list)


class DirectionUpdate(BaseModel):
    direction: Direction


class SearchUpdate(BaseModel):
    query: str = Field("", description="Free text matched against body, sender and amount")
