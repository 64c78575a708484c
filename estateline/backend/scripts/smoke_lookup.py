# scripts/smoke_lookup.py
import asyncio
import os

from app.adapters.clients.estate_api import EstateApiClient
from app.domain.types import LookupQuery
from app.service_layer.lookup import LookupEngine


async def main():
    query = LookupQuery(
        street=os.environ.get("STREET", "Station Road"),
        town=os.environ.get("TOWN", "Coalville"),
        postcode=os.environ.get("POSTCODE", ""),
        price=os.environ.get("PRICE", ""),
    )
    engine = LookupEngine(EstateApiClient())
    res = await engine.lookup(query)

    print("transient:", res.transient, "sales:", res.sales_count, "lettings:", res.lettings_count)
    for c in res.candidates:
        print(c.market.value, c.ref_id, c.address, c.price, c.agent_name)


if __name__ == "__main__":
    asyncio.run(main())
