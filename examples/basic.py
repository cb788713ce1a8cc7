# kvhttp Examples

# Can be run as a script, or part by part as cells in an editor that supports
# them. Point KVHTTP_URL at a running server (copy .env.example to .env), or
# leave it unset to use the in-memory server.

import asyncio
import os

from dotenv import load_dotenv

from kvhttp import Database, NotFoundError
from kvhttp.testing import MemoryKVServer

load_dotenv()

KVHTTP_URL = os.getenv("KVHTTP_URL")


def open_database() -> Database:
    if KVHTTP_URL:
        return Database(KVHTTP_URL)
    # No server configured: serve requests in process
    server = MemoryKVServer()
    return Database("http://kv.local", server.client())


async def write_some_keys(db: Database) -> None:
    # Commit on success, rollback if anything inside raises
    async with db.transaction() as tx:
        await tx.set("fruit/apple", "red")
        await tx.set("fruit/banana", "yellow")
        await tx.set("fruit/cherry", "dark red")
        await tx.set("veg/carrot", "orange")


async def read_ranges(db: Database) -> None:
    async with db.snapshot() as snap:
        print("All fruit:")
        async for key, value in snap.ascend("fruit/", "fruit0"):
            print(" ", key.decode(), "=", value.decode())

        print("Everything, last first:")
        async for key, _ in snap.descend():
            print(" ", key.decode())

        # Stopping early is fine; the server cleans the cursor up
        async for key, _ in snap.scan():
            print("First key:", key.decode())
            break


async def check_errors_after_the_loop(db: Database) -> None:
    snap = await db.begin_snapshot()
    await snap.discard()

    cursor = snap.ascend(raise_on_error=False)
    async for key, value in cursor:
        print(key, value)
    print("Cursor ended with:", repr(cursor.error))


async def missing_key(db: Database) -> None:
    async with db.snapshot() as snap:
        try:
            await snap.get("fruit/durian")
        except NotFoundError as e:
            print("Not found:", e)


async def main() -> None:
    async with open_database() as db:
        await write_some_keys(db)
        await read_ranges(db)
        await check_errors_after_the_loop(db)
        await missing_key(db)


if __name__ == "__main__":
    asyncio.run(main())
