"""
Pydantic schemas for Settlement entity.
"""
from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Annotated, List, Optional, Union, Literal
from datetime import date as dt_date
from decimal import Decimal
from enum import Enum
from app.core.config import settings
from app.core.utils import generate_id

# Decimals stay exact in Python and go out as plain JSON numbers
Amount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

# Upper bounds keep every sum well inside the default 28-digit decimal context
MAX_AMOUNT = Decimal("1e15")
MAX_RATIO = Decimal("1e4")
MAX_BALANCE = Decimal("1e20")


class SchemaModel(BaseModel):
    """Base schema accepting both snake_case names and camelCase aliases."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SplitMethod(str, Enum):
    """How one expense is divided among its participants."""
    EQUAL = "equal"
    INDIVIDUAL = "individual"
    RATIO = "ratio"


class Participant(SchemaModel):
    """Schema for a settlement participant."""
    id: str
    name: str
    is_treasurer: bool = False  # Informational only


class IndividualAmount(SchemaModel):
    """Fixed share owed by one participant."""
    participant_id: str
    amount: Amount = Field(ge=0, lt=MAX_AMOUNT)


class RatioSetting(SchemaModel):
    """Percentage share owed by one participant."""
    participant_id: str
    ratio: Amount = Field(ge=0, lt=MAX_RATIO)  # Percent, expected to sum to 100 but not enforced


class EqualSplit(SchemaModel):
    method: Literal["equal"] = "equal"


class IndividualSplit(SchemaModel):
    method: Literal["individual"] = "individual"
    amounts: List[IndividualAmount] = []


class RatioSplit(SchemaModel):
    method: Literal["ratio"] = "ratio"
    ratios: List[RatioSetting] = []


Split = Annotated[Union[EqualSplit, IndividualSplit, RatioSplit], Field(discriminator="method")]


def _pop_either(data: dict, *keys):
    """Pop the first present key out of data, dropping the others."""
    value = None
    for key in keys:
        if key in data:
            found = data.pop(key)
            if value is None:
                value = found
    return value


class Expense(SchemaModel):
    """Schema for a single shared expense."""
    id: str = Field(default_factory=generate_id)
    name: str = ""
    amount: Amount = Field(gt=0, lt=MAX_AMOUNT)
    paid_by: str
    participant_ids: List[str] = Field(min_length=1)
    split: Split = Field(default_factory=EqualSplit)

    @model_validator(mode="before")
    @classmethod
    def fold_flat_split(cls, data):
        """
        Accept the flat shape (split_method + individual_amounts / ratio_settings)
        and turn it into the tagged split variant.
        """
        if not isinstance(data, dict) or "split" in data:
            return data
        data = dict(data)
        method = _pop_either(data, "split_method", "splitMethod")
        amounts = _pop_either(data, "individual_amounts", "individualAmounts")
        ratios = _pop_either(data, "ratio_settings", "ratioSettings")
        if method is None:
            return data

        method = SplitMethod(method)
        if method == SplitMethod.INDIVIDUAL:
            data["split"] = {"method": method.value, "amounts": amounts or []}
        elif method == SplitMethod.RATIO:
            data["split"] = {"method": method.value, "ratios": ratios or []}
        else:
            data["split"] = {"method": method.value}
        return data

    @field_validator("participant_ids")
    @classmethod
    def check_unique_participants(cls, v):
        """A participant can share an expense only once."""
        if len(set(v)) != len(v):
            raise ValueError("participant_ids must not contain duplicates")
        return v

    @property
    def split_method(self) -> SplitMethod:
        return SplitMethod(self.split.method)


class Settlement(SchemaModel):
    """Schema for a whole settlement: who took part and what was spent."""
    id: str = Field(default_factory=generate_id)
    name: str = ""
    date: Optional[dt_date] = None
    currency: str = Field(default_factory=lambda: settings.DEFAULT_CURRENCY)
    participants: List[Participant] = Field(min_length=1)
    expenses: List[Expense] = []

    @field_validator("participants")
    @classmethod
    def check_unique_ids(cls, v):
        """Participant ids must be unique within a settlement."""
        ids = [p.id for p in v]
        if len(set(ids)) != len(ids):
            raise ValueError("participant ids must be unique")
        return v


class PersonalBalance(SchemaModel):
    """Net position of one participant (positive = receives, negative = pays)."""
    participant_id: str
    participant_name: str = ""
    total_paid: Amount = Field(default=Decimal(0), gt=-MAX_BALANCE, lt=MAX_BALANCE)
    total_owed: Amount = Field(default=Decimal(0), gt=-MAX_BALANCE, lt=MAX_BALANCE)
    balance: Amount = Field(gt=-MAX_BALANCE, lt=MAX_BALANCE)


class Transaction(SchemaModel):
    """Schema for a single payment from a debtor to a creditor."""
    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")
    amount: int = Field(gt=0)  # Whole currency units
    from_name: str = ""
    to_name: str = ""


class SettlementResult(SchemaModel):
    """Schema for the complete settlement report."""
    settlement: Settlement
    personal_balances: List[PersonalBalance]
    transactions: List[Transaction]
    total_amount: Amount
    participant_count: int
    summary: str = ""


class SettlementSummary(SchemaModel):
    """Schema for the shareable plain-text summary."""
    settlement_id: str
    summary: str
