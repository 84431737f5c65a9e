import argparse
import sqlite3
import sys

import httpx
import uvloop

from nameindex import config
from nameindex.client import LogClient
from nameindex.db import connect, ensure_schema
from nameindex.indexer import sync_all

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="vet.domains name indexer")
    parser.add_argument("-n", "--node", default=config.NODE_URL, help="Node URL of the blockchain")
    parser.add_argument("-c", "--contract", default=config.REGISTRY_ADDRESS, help="Registry address")
    parser.add_argument("-d", "--database", default=config.DB_PATH, help="SQLite storage")
    return parser.parse_args(argv)

async def run(node: str, contract: str, database: str):
    print(f"Node: {node}")
    print(f"Registry: {contract}")
    print(f"Database: {database}")

    conn = None
    try:
        conn = connect(database)
        ensure_schema(conn)
        async with LogClient(node) as client:
            resolvers, records = await sync_all(conn, client, contract)
        print(f"Synced, head={records.to_block} (resolvers to {resolvers.to_block})")
    finally:
        if conn is not None:
            conn.close()

def main(argv=None):
    args = parse_args(argv)
    try:
        uvloop.run(run(args.node, args.contract, args.database))
    except (httpx.HTTPError, sqlite3.Error) as e:
        print(f"[sync] failed: {e}", file=sys.stderr)
        raise SystemExit(1)
    print("[sync] done")

if __name__ == "__main__":
    main()
