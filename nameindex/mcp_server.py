# mcp_server.py (read-only tools over the name index)
from fastmcp import FastMCP
from pydantic import BaseModel, Field

from nameindex import config, lookup
from nameindex.db import connect, ensure_schema

mcp = FastMCP("vet-domains-index")
_db = None

def get_db():
    # opened on first tool call
    global _db
    if _db is None:
        _db = connect(config.DB_PATH)
        ensure_schema(_db)
    return _db

# --------- Pydantic input models ----------
class NodeIn(BaseModel):
    node: str = Field(..., description="node id (0x + 64 hex) or a name like alice.vet")

class AddressIn(BaseModel):
    address: str = Field(..., min_length=42, max_length=42)

class RecordIn(BaseModel):
    node: str
    type: str = Field("text", pattern="^(text|contenthash|dns|zonehash)$")
    key: str = ""

# ----------------- Tools ------------------
@mcp.tool(name="resolver_get")
def resolver_get(args: NodeIn):
    """Resolver contract currently assigned to a node."""
    return lookup.resolver_of(get_db(), args.node) or {"error": f"no resolver for {args.node}"}

@mcp.tool(name="address_get")
def address_get(args: NodeIn):
    """Address a node points to."""
    return lookup.address_of(get_db(), args.node) or {"error": f"no address for {args.node}"}

@mcp.tool(name="name_get")
def name_get(args: NodeIn):
    """Name record stored for a node."""
    return lookup.name_of(get_db(), args.node) or {"error": f"no name for {args.node}"}

@mcp.tool(name="primary_name_get")
def primary_name_get(args: AddressIn):
    """Primary (reverse) name of an address."""
    return lookup.primary_name(get_db(), args.address) or {"error": f"no primary name for {args.address}"}

@mcp.tool(name="record_get")
def record_get(args: RecordIn):
    """Single text/contenthash/dns/zonehash record of a node."""
    return lookup.record(get_db(), args.node, args.type, args.key) or {"error": "record not found"}

@mcp.tool(name="records_list")
def records_list(args: NodeIn):
    """All records of a node under its current resolver."""
    return lookup.records_of(get_db(), args.node)

@mcp.tool(name="sync_status")
def sync_status() -> dict:
    """Checkpoints and row counts of the index."""
    return lookup.sync_status(get_db())

def main():
    mcp.run(transport="http", host=config.MCP_HOST, port=config.MCP_PORT)

if __name__ == "__main__":
    main()
