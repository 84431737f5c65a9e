import re
from typing import Optional
from web3 import Web3
from web3.types import HexBytes

from nameindex import config

NODE_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")
EMPTY_NODE = b"\x00" * 32

# ---------------- helpers ----------------
def to_hex(x) -> Optional[str]:
    if x is None: return None
    if isinstance(x, (bytes, bytearray)): return "0x" + bytes(x).hex()
    if isinstance(x, int): return hex(x)
    return str(x).lower()

def to_addr(x) -> Optional[str]:
    if x is None: return None
    return Web3.to_checksum_address(x)

def hex_to_int(x) -> Optional[int]:
    if x is None: return None
    if isinstance(x, int): return x
    if isinstance(x, bytes): return int.from_bytes(x, "big")
    s = str(x)
    return int(s, 16) if s.startswith("0x") else int(s)

def hex_to_bytes(x) -> bytes:
    """Raw bytes of a 0x-prefixed (or bare) hex string; ValueError on bad hex."""
    if isinstance(x, (bytes, bytearray)):
        return bytes(x)
    return bytes(HexBytes(x or "0x"))

# ---------------- naming ----------------
def namehash(name: str) -> str:
    """
    Node id of a dotted name: keccak over the labels, right to left.
    Labels are used as given; callers lower-case where the namespace requires it.
    """
    node = EMPTY_NODE
    if name:
        for label in reversed(name.split(".")):
            node = bytes(Web3.keccak(node + bytes(Web3.keccak(text=label))))
    return "0x" + node.hex()

def reverse_node(address: str) -> str:
    """Node id used for reverse resolution of an address (<hex>.addr.reverse)."""
    h = address[2:] if address[:2].lower() == "0x" else address
    return namehash(f"{h.lower()}.{config.REVERSE_SUFFIX}")

def as_node(value: str) -> str:
    # a 32-byte hex value is already a node id, anything else is a name
    if NODE_RE.match(value):
        return value.lower()
    return namehash(value)

def dns_name(wire: bytes) -> str:
    """
    Dotted form of a DNS wire-format name (length-prefixed labels, 0-terminated).
    Falls back to a text decode when the bytes are not wire format.

    DNS record keys built from this ("www.alice.vet. 1") differ from keys that
    decode the raw wire bytes as text, so they do not line up with stores
    written that way.
    """
    labels = []
    i = 0
    while i < len(wire):
        n = wire[i]
        if n == 0:
            if i != len(wire) - 1:
                break
            return ".".join(labels) + "."
        label = wire[i + 1:i + 1 + n]
        if len(label) != n:
            break
        labels.append(label.decode("utf-8", errors="replace"))
        i += 1 + n
    return wire.decode("utf-8", errors="replace")
