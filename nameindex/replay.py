"""
Checkpointed event replay.

One cycle catches a set of derived tables up to the chain head:

  from = MAX(block_height) over the checkpoint tables + 1   (0 when empty)
  to   = best block, read once per cycle

Logs are fetched in ascending order, one page at a time, and every page is
decoded and written before the next one is requested. Because the resume point
is read back from the tables themselves, an interrupted cycle simply continues
from whatever was last written.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Sequence

from nameindex import config
from nameindex.db import max_block_height
from nameindex.events import Catalogue, DecodedEvent, decode_log

Handler = Callable[[Any, DecodedEvent], None]


@dataclass
class ReplayStats:
    label: str
    from_block: int
    to_block: int
    pages: int = 0
    fetched: int = 0
    applied: int = 0
    skipped: int = 0


async def replay(conn, client, *, label: str, criteria_set: Sequence[Dict[str, str]],
                 catalogue: Catalogue, handlers: Dict[str, Handler],
                 checkpoint_tables: Sequence[str], page_size: int = config.PAGE_SIZE) -> ReplayStats:
    last = max_block_height(conn, *checkpoint_tables)
    head = await client.best_block()
    stats = ReplayStats(label, 0 if last is None else last + 1, head)

    if stats.from_block > stats.to_block:
        print(f"[{label}] up to date @ block {head}")
        return stats

    print(f"[{label}] replaying blocks {stats.from_block}..{stats.to_block}")
    offset = 0
    while True:
        logs = await client.query_logs(criteria_set, stats.from_block, stats.to_block,
                                       offset=offset, limit=page_size)
        stats.pages += 1
        if not logs:
            break
        stats.fetched += len(logs)

        for raw in logs:
            event = decode_log(catalogue, raw)
            handler = handlers.get(event.name) if event else None
            if handler is None:
                stats.skipped += 1
                continue
            handler(conn, event)
            stats.applied += 1

        print(f"[{label}] offset={offset} logs={len(logs)} applied={stats.applied}")
        offset += page_size

    print(f"[{label}] sync complete: {stats.applied} applied, {stats.skipped} skipped")
    return stats
