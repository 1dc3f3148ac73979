"""
Entity model for the bot/listener registry.

Records (``Bot``, ``Listener``) are what the registry stores and persists.
Views (``BotView``, ``ListenerView``) are what callers get back; their
sensitive fields are carried in memory but never serialized.

``Patch`` and ``Filter`` are the two generic partial-record shapes shared by
every entity: a patch merges its non-None fields onto a record, a filter
matches a record when every supplied field is equal.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, TypeVar

from pydantic import BaseModel, Field, FiniteFloat

RecordT = TypeVar("RecordT", bound=BaseModel)

SENSITIVE_BOT_FIELDS = ("api_key", "api_secret", "webhook_secret", "private_key")
SENSITIVE_LISTENER_FIELDS = ("secret",)


# Records
class Listener(BaseModel):
    """Webhook ingestion rule, stored under its owning bot keyed by listener_id."""
    service: str
    secret: str = ""
    msg: str = ""


class Bot(BaseModel):
    """Trading venue connection record."""
    bot_id: str
    name: str
    exchange: str
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    rest_endpoint: Optional[str] = None
    rpc_endpoint: Optional[str] = None
    webhook_secret: Optional[str] = None
    trading_fee: Optional[FiniteFloat] = None
    private_key: Optional[str] = None
    contract_address: Optional[str] = None
    listeners: Dict[str, Listener] = Field(default_factory=dict)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bot):
            return NotImplemented
        return self.bot_id == other.bot_id

    def __hash__(self) -> int:
        return hash(self.bot_id)

    def scalar_fields(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"listeners"})


# Partial records
class Patch(BaseModel):
    """Partial record: every field optional, ``None`` means leave unchanged."""

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)

    def is_empty(self) -> bool:
        return not self.changes()

    def apply(self, record: RecordT) -> RecordT:
        return record.model_copy(update=self.changes())


class Filter(BaseModel):
    """Equality predicates; absent fields are wildcards, supplied ones are ANDed."""

    def criteria(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)

    def matches(self, fields: Mapping[str, Any]) -> bool:
        return all(fields.get(key) == value for key, value in self.criteria().items())


class BotPatch(Patch):
    name: Optional[str] = None
    exchange: Optional[str] = None
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    rest_endpoint: Optional[str] = None
    rpc_endpoint: Optional[str] = None
    webhook_secret: Optional[str] = None
    trading_fee: Optional[FiniteFloat] = None
    private_key: Optional[str] = None
    contract_address: Optional[str] = None


class ListenerPatch(Patch):
    service: Optional[str] = None
    secret: Optional[str] = None
    msg: Optional[str] = None


class BotFilter(Filter):
    bot_id: Optional[str] = None
    name: Optional[str] = None
    exchange: Optional[str] = None
    api_key: Optional[str] = None
    rest_endpoint: Optional[str] = None
    rpc_endpoint: Optional[str] = None
    trading_fee: Optional[FiniteFloat] = None
    private_key: Optional[str] = None
    contract_address: Optional[str] = None

    def matches_bot(self, bot: Bot) -> bool:
        return self.matches(bot.scalar_fields())


class ListenerFilter(Filter):
    listener_id: Optional[str] = None
    service: Optional[str] = None

    def matches_listener(self, listener_id: str, listener: Listener) -> bool:
        return self.matches({"listener_id": listener_id, **listener.model_dump()})


# Insert args
class BotInsertArgs(BaseModel):
    """Input for creating a bot; ``bot_id`` is generated when omitted."""
    bot_id: Optional[str] = None
    name: str
    exchange: str
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    rest_endpoint: Optional[str] = None
    rpc_endpoint: Optional[str] = None
    webhook_secret: Optional[str] = None
    trading_fee: Optional[FiniteFloat] = None
    private_key: Optional[str] = None
    contract_address: Optional[str] = None


class ListenerInsertArgs(BaseModel):
    """Input for adding a listener; ``msg`` defaults to a per-service template."""
    listener_id: Optional[str] = None
    service: str
    secret: Optional[str] = None
    msg: Optional[str] = None


# Views
class ListenerView(BaseModel):
    bot_id: str
    listener_id: str
    service: str
    msg: str = ""
    secret: Optional[str] = Field(default=None, exclude=True, repr=False)

    @classmethod
    def from_record(cls, bot_id: str, listener_id: str, listener: Listener) -> "ListenerView":
        return cls(
            bot_id=bot_id,
            listener_id=listener_id,
            service=listener.service,
            msg=listener.msg,
            secret=listener.secret,
        )


class BotView(BaseModel):
    bot_id: str
    name: str
    exchange: str
    rest_endpoint: Optional[str] = None
    rpc_endpoint: Optional[str] = None
    trading_fee: Optional[float] = None
    contract_address: Optional[str] = None
    listeners: Dict[str, ListenerView] = Field(default_factory=dict)
    api_key: Optional[str] = Field(default=None, exclude=True, repr=False)
    api_secret: Optional[str] = Field(default=None, exclude=True, repr=False)
    webhook_secret: Optional[str] = Field(default=None, exclude=True, repr=False)
    private_key: Optional[str] = Field(default=None, exclude=True, repr=False)

    @classmethod
    def from_record(cls, bot: Bot) -> "BotView":
        return cls(
            **bot.scalar_fields(),
            listeners={
                listener_id: ListenerView.from_record(bot.bot_id, listener_id, listener)
                for listener_id, listener in bot.listeners.items()
            },
        )


class RegistryDocument(BaseModel):
    """Full persisted registry: ``{"bots": {bot_id: Bot}}``."""
    bots: Dict[str, Bot] = Field(default_factory=dict)
