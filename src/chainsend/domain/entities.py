"""Domain entities: Transfer, Payment, Case and the ledger's signed state receipts."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer


# Wire models keep unknown fields so payment metadata round-trips.
_WIRE_CONFIG = ConfigDict(extra="allow")


class Funds(BaseModel):
    """A single debit or credit entry of a transfer."""

    model_config = _WIRE_CONFIG

    account: Optional[str] = None
    amount: Optional[str] = None
    authorized: Optional[bool] = None
    memo: Optional[dict[str, Any]] = None


class Transfer(BaseModel):
    """Unit of value movement on a single ledger."""

    model_config = _WIRE_CONFIG

    id: Optional[str] = None
    ledger: str
    debits: list[Funds] = Field(default_factory=list)
    credits: list[Funds] = Field(default_factory=list)
    execution_condition: Optional[str] = None
    cancellation_condition: Optional[str] = None
    cases: Optional[list[str]] = None
    expires_at: Optional[datetime] = None
    additional_info: Optional[dict[str, Any]] = None
    state: Optional[str] = None
    # Ledger response recorded after submission; never sent back out.
    ledger_state: Optional[dict[str, Any]] = Field(default=None, exclude=True)

    @field_serializer("expires_at")
    def serialize_expires_at(self, value: Optional[datetime]) -> Optional[str]:
        return value.isoformat() if value else None

    def to_document(self) -> dict[str, Any]:
        """Wire representation of the transfer, without local bookkeeping."""
        return self.model_dump(exclude_none=True)


class Payment(BaseModel):
    """A single-hop payment between a source and a destination transfer."""

    model_config = _WIRE_CONFIG

    id: str
    source_transfers: list[Transfer]
    destination_transfers: list[Transfer]

    def is_one_to_one(self) -> bool:
        return len(self.source_transfers) == 1 and len(self.destination_transfers) == 1

    def to_document(self) -> dict[str, Any]:
        """Wire representation of the payment and its transfers."""
        document = self.model_dump(
            exclude={"source_transfers", "destination_transfers"}, exclude_none=True
        )
        document["source_transfers"] = [t.to_document() for t in self.source_transfers]
        document["destination_transfers"] = [
            t.to_document() for t in self.destination_transfers
        ]
        return document


class NotaryRef(BaseModel):
    """Notary entry inside a case."""

    url: str


class SourceCredentials(BaseModel):
    """Basic-auth credentials of the paying account on the first ledger."""

    username: str
    password: str


class Case(BaseModel):
    """A notary-held record coordinating atomic settlement of a transfer chain."""

    id: str
    state: str = "proposed"
    execution_condition: str
    expires_at: datetime
    notaries: list[NotaryRef]
    notification_targets: list[str]

    @field_serializer("expires_at")
    def serialize_expires_at(self, value: datetime) -> str:
        return value.isoformat()


class TransferStateMessage(BaseModel):
    """Signed part of a transfer state receipt."""

    model_config = _WIRE_CONFIG

    id: str
    state: str


class TransferStateReceipt(BaseModel):
    """Ledger-signed statement of a transfer's current lifecycle stage."""

    model_config = _WIRE_CONFIG

    type: str
    signature: str
    message: TransferStateMessage


class Fulfillment(BaseModel):
    """Proof that an execution condition was met."""

    type: str
    signature: str

    @classmethod
    def from_receipt(cls, receipt: TransferStateReceipt) -> "Fulfillment":
        return cls(type=receipt.type, signature=receipt.signature)
