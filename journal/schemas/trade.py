"""Pydantic schemas for trades.

Wire names are camelCase (``entryDate``, ``netPL``) to match the spreadsheet
endpoint and the browser store; Python attributes are snake_case.
"""

from datetime import date

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from journal.services import pl_calculator
from journal.services.pl_calculator import (
    DEFAULT_FEE_RATE,
    normalize_fee_rate,
)
from journal.utils.dates import coerce_date

STOCK_CODE_PATTERN = r"^[A-Z0-9]{1,12}$"


def _to_float(value):
    if isinstance(value, str):
        value = value.strip().replace(",", "")
    return float(value)


def _to_int(value):
    if isinstance(value, str):
        value = value.strip()
    return int(float(value))


class TradeInput(BaseModel):
    """Raw form input for a new trade, validated before any sync happens."""

    entry_date: date
    exit_date: date
    stock_code: str = Field(pattern=STOCK_CODE_PATTERN)
    entry_price: float = Field(gt=0)
    exit_price: float = Field(gt=0)
    lot: int = Field(ge=1)
    strategy: str = Field(min_length=1, max_length=120)
    notes: str = Field(default="", max_length=2000)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("stock_code", mode="before")
    @classmethod
    def _normalize_stock_code(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("strategy")
    @classmethod
    def _trim_strategy(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text

    @field_validator("notes", mode="before")
    @classmethod
    def _notes_default(cls, value):
        return "" if value is None else value

    @model_validator(mode="after")
    def _validate_dates(self):
        if self.exit_date < self.entry_date:
            raise ValueError("exitDate must not be before entryDate")
        return self


class Trade(BaseModel):
    """A recorded trade. Immutable; P/L fields are derived, never stored."""

    id: str
    entry_date: date
    exit_date: date
    stock_code: str
    entry_price: float
    exit_price: float
    lot: int
    fee: float = DEFAULT_FEE_RATE
    strategy: str = ""
    notes: str = ""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        if value is None:
            raise ValueError("trade id is missing")
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        trade_id = str(value).strip()
        if not trade_id:
            raise ValueError("trade id is blank")
        return trade_id

    @field_validator("entry_date", "exit_date", mode="before")
    @classmethod
    def _parse_dates(cls, value):
        return coerce_date(value)

    @field_validator("stock_code", mode="before")
    @classmethod
    def _upper_stock_code(cls, value):
        return str(value).strip().upper()

    @field_validator("entry_price", "exit_price", mode="before")
    @classmethod
    def _coerce_price(cls, value):
        return _to_float(value)

    @field_validator("lot", mode="before")
    @classmethod
    def _coerce_lot(cls, value):
        return _to_int(value)

    @field_validator("fee", mode="before")
    @classmethod
    def _coerce_fee(cls, value):
        if value is None or value == "":
            return DEFAULT_FEE_RATE
        return normalize_fee_rate(_to_float(value))

    @field_validator("strategy", "notes", mode="before")
    @classmethod
    def _text_default(cls, value):
        return "" if value is None else str(value)

    @computed_field(alias="netPL")
    @property
    def net_pl(self) -> float:
        return pl_calculator.compute_net_pl(self.entry_price, self.exit_price, self.lot, self.fee)

    @computed_field(alias="isWin")
    @property
    def is_win(self) -> bool:
        return pl_calculator.is_win(self.net_pl)

    @computed_field(alias="date")
    @property
    def trade_date(self) -> date:
        """Grouping key for "today's trades"."""
        return self.entry_date

    @classmethod
    def from_input(cls, trade_id: str, data: TradeInput, fee_rate: float) -> "Trade":
        return cls(id=trade_id, fee=fee_rate, **data.model_dump())

    def to_record(self) -> dict:
        """JSON-ready dict using wire names."""
        return self.model_dump(mode="json", by_alias=True)
