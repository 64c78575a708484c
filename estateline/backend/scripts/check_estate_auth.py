import asyncio

from app.adapters.clients.estate_api import EstateApiClient
from app.config import settings
from app.domain.types import Market, SearchMode, SourceRequest


async def main():
    key = settings.ESTATE_API_KEY
    print("Key set:", bool(key), "len:", len(key) if key else None)
    client = EstateApiClient()
    req = SourceRequest(market=Market.sales, mode=SearchMode.text, page_size=1)
    outcome = await client.issue(req, settings.ESTATE_TIMEOUT_S)
    print("Outcome:", type(outcome).__name__, getattr(outcome, "reason", ""))
    print("Records:", len(getattr(outcome, "records", ())))

asyncio.run(main())
