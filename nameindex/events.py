"""
Event catalogue and log decoder.

A raw log (as returned by /logs/event) is matched on its first topic against a
fixed catalogue of event signatures. Anything that does not decode cleanly is
reported as "no match" (None) so the caller can move on to the next log.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from eth_abi import decode as abi_decode
from eth_abi.exceptions import DecodingError
from web3 import Web3

from nameindex.helpers import hex_to_bytes, hex_to_int

# (type, name, indexed)
Param = Tuple[str, str, bool]


@dataclass(frozen=True)
class EventSignature:
    name: str
    inputs: Tuple[Param, ...]

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(t for t, _, _ in self.inputs)})"

    @property
    def topic(self) -> str:
        return "0x" + bytes(Web3.keccak(text=self.signature)).hex()

    @property
    def indexed(self) -> List[Param]:
        return [p for p in self.inputs if p[2]]

    @property
    def unindexed(self) -> List[Param]:
        return [p for p in self.inputs if not p[2]]


class Catalogue:
    def __init__(self, events: Iterable[EventSignature]):
        self.events = list(events)
        self.by_topic = {e.topic: e for e in self.events}

    @property
    def topics(self) -> List[str]:
        return [e.topic for e in self.events]


@dataclass
class DecodedEvent:
    name: str
    args: Dict[str, Any]
    address: str
    block_number: int
    block_id: Optional[str] = None
    block_timestamp: Optional[int] = None
    tx_id: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict, repr=False)


# --- registry ---
NEW_RESOLVER = EventSignature("NewResolver", (
    ("bytes32", "node", True), ("address", "resolver", False)))

# --- resolver ---
ADDR_CHANGED = EventSignature("AddrChanged", (
    ("bytes32", "node", True), ("address", "a", False)))
NAME_CHANGED = EventSignature("NameChanged", (
    ("bytes32", "node", True), ("string", "name", False)))
TEXT_CHANGED = EventSignature("TextChanged", (
    ("bytes32", "node", True), ("string", "indexedKey", True),
    ("string", "key", False), ("string", "value", False)))
CONTENTHASH_CHANGED = EventSignature("ContenthashChanged", (
    ("bytes32", "node", True), ("bytes", "hash", False)))
DNS_RECORD_CHANGED = EventSignature("DNSRecordChanged", (
    ("bytes32", "node", True), ("bytes", "name", False),
    ("uint16", "resource", False), ("bytes", "record", False)))
DNS_RECORD_DELETED = EventSignature("DNSRecordDeleted", (
    ("bytes32", "node", True), ("bytes", "name", False), ("uint16", "resource", False)))
DNS_ZONEHASH_CHANGED = EventSignature("DNSZonehashChanged", (
    ("bytes32", "node", True), ("bytes", "lastzonehash", False), ("bytes", "zonehash", False)))

REGISTRY_EVENTS = Catalogue([NEW_RESOLVER])
RESOLVER_EVENTS = Catalogue([
    NAME_CHANGED,
    ADDR_CHANGED,
    TEXT_CHANGED,
    CONTENTHASH_CHANGED,
    DNS_RECORD_CHANGED,
    DNS_RECORD_DELETED,
    DNS_ZONEHASH_CHANGED,
])


def _decode_topic(typ: str, topic: bytes) -> Any:
    if typ in ("string", "bytes") or typ.endswith("]") or typ.startswith("("):
        # indexed dynamic values only carry their keccak hash
        return topic
    return abi_decode([typ], topic)[0]


def decode_log(catalogue: Catalogue, raw: Dict[str, Any]) -> Optional[DecodedEvent]:
    """Decode one raw log against the catalogue; None when it does not match."""
    try:
        topics = [hex_to_bytes(t) for t in raw.get("topics") or []]
        if not topics:
            return None
        event = catalogue.by_topic.get("0x" + topics[0].hex())
        if event is None:
            return None
        if len(topics) != 1 + len(event.indexed) or any(len(t) != 32 for t in topics):
            return None

        args: Dict[str, Any] = {}
        for (typ, name, _), topic in zip(event.indexed, topics[1:]):
            args[name] = _decode_topic(typ, topic)

        unindexed = event.unindexed
        values = abi_decode([t for t, _, _ in unindexed], hex_to_bytes(raw.get("data")))
        for (typ, name, _), value in zip(unindexed, values):
            args[name] = Web3.to_checksum_address(value) if typ == "address" else value

        meta = raw.get("meta") or {}
        return DecodedEvent(
            name=event.name,
            args=args,
            address=str(raw["address"]).lower(),
            block_number=hex_to_int(meta["blockNumber"]),
            block_id=meta.get("blockID"),
            block_timestamp=meta.get("blockTimestamp"),
            tx_id=meta.get("txID"),
            meta=meta,
        )
    except (DecodingError, ValueError, TypeError, KeyError, AttributeError):
        return None
