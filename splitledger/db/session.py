from contextlib import asynccontextmanager

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from splitledger.core.errors import StorageFailure


class MongoUnitOfWork:
    """
    One MongoDB multi-document transaction per ``transaction()`` block.

    Every write made with the yielded session commits together on exit or is
    aborted when the block raises. Needs a replica set or sharded cluster.
    """

    def __init__(self, client: AsyncIOMotorClient):
        self.client = client

    @asynccontextmanager
    async def transaction(self):
        try:
            async with await self.client.start_session() as session:
                async with session.start_transaction():
                    yield session
        except PyMongoError as exc:
            raise StorageFailure(str(exc), "transaction") from exc
