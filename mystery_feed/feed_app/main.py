import asyncio
import logging
from typing import Iterator

from fastapi import Depends, FastAPI, Response
from fastapi.responses import PlainTextResponse

from ..api.feed_client import FeedFetcher
from ..config import Settings, get_settings
from ..services.feed_rebuilder import FeedRebuilder

# Configure logging
logging.basicConfig(level=get_settings().LOG_LEVEL.upper(), format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# --- FastAPI App Initialization --- #
app = FastAPI(
    title="Mystery Guest Feed",
    description="Republishes a podcast feed with guest names hidden from episode titles.",
    version="0.1.0"
)


# --- Dependencies --- #

def get_fetcher(settings: Settings = Depends(get_settings)) -> Iterator[FeedFetcher]:
    # One session per request, closed once the response is done
    with FeedFetcher.from_settings(settings) as fetcher:
        yield fetcher


def get_rebuilder(settings: Settings = Depends(get_settings)) -> FeedRebuilder:
    return FeedRebuilder.from_settings(settings)


# --- Routes --- #

@app.get("/", tags=["Feed"])
async def redacted_feed(
    fetcher: FeedFetcher = Depends(get_fetcher),
    rebuilder: FeedRebuilder = Depends(get_rebuilder),
    settings: Settings = Depends(get_settings),
):
    """Returns the upstream feed with every episode title redacted."""
    logger.info(f"Feed requested; fetching {fetcher.feed_url}")
    try:
        # The fetch blocks on the network, so keep it off the event loop
        source_feed = await asyncio.to_thread(fetcher.fetch)
        _, document = rebuilder.rebuild(source_feed)
    except Exception as e:
        # FetchError, ParseError, TransformError or anything unexpected: the client only sees a bare 500
        logger.exception(f"Error fetching or generating the RSS feed: {e}")
        return PlainTextResponse("Internal Server Error", status_code=500)

    return Response(
        content=document,
        media_type="application/xml",
        headers={"Cache-Control": f"max-age={settings.CACHE_MAX_AGE_SECONDS}"},
    )


@app.get("/health", tags=["Status"])
async def health():
    """Health check."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    logger.info(f"Server is running on http://{settings.HOST}:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
