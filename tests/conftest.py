"""
Pytest configuration for the name index.

Puts the project root on sys.path so `import nameindex` works without an install,
and provides an in-memory store, a log builder and a fake Thor log source.
"""

import os
import sys

import httpx
import pytest
from eth_abi import encode
from web3 import Web3

_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from nameindex.db import connect, ensure_schema  # noqa: E402
from nameindex.helpers import namehash  # noqa: E402

REGISTRY = "0xa9231da8BF8D10e2df3f6E03Dd5449caD600129b"
R1 = "0x1111111111111111111111111111111111111111"
R2 = "0x2222222222222222222222222222222222222222"
A1 = Web3.to_checksum_address("0xabcdef0123456789abcdef0123456789abcdef01")
N1 = namehash("alice.vet")


def node_bytes(node_hex: str) -> bytes:
    return bytes.fromhex(node_hex[2:])


def make_log(event, args, *, address, block, data=None, topics=None):
    """Raw /logs/event entry for `event` with `args`, ABI-encoded like a node would."""
    if topics is None:
        topics = [event.topic]
        for typ, name, _ in event.indexed:
            value = args[name]
            if typ == "string":
                topics.append("0x" + bytes(Web3.keccak(text=value)).hex())
            elif typ == "bytes":
                topics.append("0x" + bytes(Web3.keccak(value)).hex())
            else:
                topics.append("0x" + encode([typ], [value]).hex())
    if data is None:
        unindexed = event.unindexed
        data = "0x" + encode([t for t, _, _ in unindexed], [args[n] for _, n, _ in unindexed]).hex()
    return {
        "address": address,
        "topics": topics,
        "data": data,
        "meta": {
            "blockID": "0x%064x" % block,
            "blockNumber": block,
            "blockTimestamp": 1700000000 + block * 10,
            "txID": "0x%064x" % (block * 1000),
            "txOrigin": R1,
            "clauseIndex": 0,
        },
    }


class FakeLogSource:
    """In-memory stand-in for LogClient that honours range, criteria, offset and limit."""

    def __init__(self, logs=None, head=0, fail_at_offset=None):
        self.logs = list(logs or [])
        self.head = head
        self.fail_at_offset = fail_at_offset
        self.calls = []

    async def best_block(self):
        return self.head

    async def query_logs(self, criteria_set, from_block, to_block, *, offset=0, limit=256, order="asc"):
        self.calls.append({"from": from_block, "to": to_block, "offset": offset, "limit": limit})
        if self.fail_at_offset is not None and offset >= self.fail_at_offset:
            raise httpx.ConnectError("node unreachable")

        def matches(log):
            for c in criteria_set:
                if log["topics"] and log["topics"][0] != c["topic0"]:
                    continue
                if "address" in c and log["address"].lower() != c["address"].lower():
                    continue
                return True
            return False

        selected = [
            log for log in self.logs
            if from_block <= log["meta"]["blockNumber"] <= to_block and matches(log)
        ]
        selected.sort(key=lambda log: log["meta"]["blockNumber"])
        return selected[offset:offset + limit]


@pytest.fixture
def conn():
    c = connect(":memory:")
    ensure_schema(c)
    yield c
    c.close()
