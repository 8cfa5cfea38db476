import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from watchgate.config import Settings, get_settings
from watchgate.routes.catalog import router as catalog_router
from watchgate.routes.dashboard import router as dashboard_router
from watchgate.routes.session import router as session_router
from watchgate.services.catalog import TitleFetcher, build_catalog, refresh_titles
from watchgate.services.embed import OutboundEmbedChannel
from watchgate.services.engagement_timer import Scheduler
from watchgate.services.gate import GateConfig, GateController
from watchgate.services.player_events import PlayerEventAdapter
from watchgate.services.session_boundary import SessionBoundary

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, scheduler: Scheduler | None = None) -> FastAPI:
    """Build the API.

    Gate ticks run on *scheduler*, which defaults to the server's event loop.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        state = application.state
        embed = OutboundEmbedChannel(base_url=settings.embed_base_url)
        adapter = PlayerEventAdapter(embed, settings.trusted_player_origin)
        controller = GateController(
            scheduler or asyncio.get_running_loop(),
            adapter,
            GateConfig.from_settings(settings),
        )
        state.settings = settings
        state.embed = embed
        state.boundary = SessionBoundary(controller, embed)
        state.catalog = build_catalog(settings.youtube_links, settings.default_direct_link)
        state.title_fetcher = TitleFetcher(
            settings.title_lookup_url,
            timeout=settings.title_lookup_timeout_seconds,
        )

        titles_task = None
        if settings.fetch_titles_on_startup:
            # Cards are served with placeholder titles until this finishes.
            titles_task = asyncio.create_task(refresh_titles(state.catalog, state.title_fetcher))

        logger.info(
            "Watch gate ready: %d item(s), unlock after %ds of playback",
            len(state.catalog), settings.required_watch_seconds,
        )

        try:
            yield
        finally:
            state.boundary.close()
            if titles_task is not None and not titles_task.done():
                titles_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await titles_task

    application = FastAPI(
        title="Watch Gate API",
        version="0.1.0",
        description="Unlock an external link after a minimum amount of actively played video.",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(catalog_router)
    application.include_router(session_router)
    application.include_router(dashboard_router)

    return application


app = create_app()
