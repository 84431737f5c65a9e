from nameindex import db
from nameindex.client import criterion
from nameindex.events import DecodedEvent, REGISTRY_EVENTS, RESOLVER_EVENTS
from nameindex.helpers import dns_name, to_addr, to_hex, reverse_node
from nameindex.replay import replay

# ---------- registry: resolver assignment ----------
def on_new_resolver(conn, ev: DecodedEvent):
    node = to_hex(ev.args["node"])
    resolver = ev.args["resolver"].lower()
    db.upsert(conn, "node_resolvers", {"node": node},
              {"resolver_address": resolver, "block_height": ev.block_number})
    # keep name/address of an existing projection row
    db.upsert(conn, "nodes", {"node": node},
              {"resolver_address": resolver, "block_height": ev.block_number})

# ---------- resolver: records ----------
def _pair(ev: DecodedEvent):
    return ev.address, to_hex(ev.args["node"])

def on_name_changed(conn, ev: DecodedEvent):
    resolver, node = _pair(ev)
    name = ev.args["name"]
    db.upsert(conn, "node_names", {"resolver_address": resolver, "node": node},
              {"name": name, "block_height": ev.block_number})
    db.update(conn, "nodes", {"node": node, "resolver_address": resolver},
              {"name": name, "block_height": ev.block_number})

def on_addr_changed(conn, ev: DecodedEvent):
    resolver, node = _pair(ev)
    address = to_addr(ev.args["a"])
    db.upsert(conn, "node_addresses", {"resolver_address": resolver, "node": node},
              {"address": address, "block_height": ev.block_number})
    db.update(conn, "nodes", {"node": node, "resolver_address": resolver},
              {"address": address, "reverse_node": reverse_node(address), "block_height": ev.block_number})

def _set_record(conn, ev: DecodedEvent, type_: str, key: str, value):
    resolver, node = _pair(ev)
    keys = {"node": node, "resolver_address": resolver, "type": type_, "key": key}
    if value is None:
        db.delete(conn, "records", keys)
    else:
        db.upsert(conn, "records", keys, {"value": value, "block_height": ev.block_number})

def _bytes_value(b: bytes):
    # empty bytes mean the record was cleared
    return to_hex(b) if b else None

def _dns_key(ev: DecodedEvent) -> str:
    return f"{dns_name(ev.args['name'])} {ev.args['resource']}"

def on_text_changed(conn, ev: DecodedEvent):
    _set_record(conn, ev, "text", ev.args["key"], ev.args["value"])

def on_contenthash_changed(conn, ev: DecodedEvent):
    _set_record(conn, ev, "contenthash", "", _bytes_value(ev.args["hash"]))

def on_dns_record_changed(conn, ev: DecodedEvent):
    _set_record(conn, ev, "dns", _dns_key(ev), _bytes_value(ev.args["record"]))

def on_dns_record_deleted(conn, ev: DecodedEvent):
    _set_record(conn, ev, "dns", _dns_key(ev), None)

def on_dns_zonehash_changed(conn, ev: DecodedEvent):
    _set_record(conn, ev, "zonehash", "", to_hex(ev.args["zonehash"]))

REGISTRY_HANDLERS = {
    "NewResolver": on_new_resolver,
}

RESOLVER_HANDLERS = {
    "NameChanged": on_name_changed,
    "AddrChanged": on_addr_changed,
    "TextChanged": on_text_changed,
    "ContenthashChanged": on_contenthash_changed,
    "DNSRecordChanged": on_dns_record_changed,
    "DNSRecordDeleted": on_dns_record_deleted,
    "DNSZonehashChanged": on_dns_zonehash_changed,
}

# ---------- sync passes ----------
async def sync_resolvers(conn, client, registry: str, **kw):
    return await replay(
        conn, client,
        label="resolvers",
        criteria_set=[criterion(t, registry) for t in REGISTRY_EVENTS.topics],
        catalogue=REGISTRY_EVENTS,
        handlers=REGISTRY_HANDLERS,
        checkpoint_tables=db.RESOLVER_CHECKPOINT,
        **kw,
    )

async def sync_resolver_records(conn, client, **kw):
    return await replay(
        conn, client,
        label="records",
        criteria_set=[criterion(t) for t in RESOLVER_EVENTS.topics],
        catalogue=RESOLVER_EVENTS,
        handlers=RESOLVER_HANDLERS,
        checkpoint_tables=db.RECORD_CHECKPOINT,
        **kw,
    )

async def sync_all(conn, client, registry: str, **kw):
    # record updates only land on nodes whose resolver is already known
    resolvers = await sync_resolvers(conn, client, registry, **kw)
    records = await sync_resolver_records(conn, client, **kw)
    return resolvers, records
