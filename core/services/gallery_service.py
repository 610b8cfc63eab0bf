# =============================================================================
# core/services/gallery_service.py - Storage-Backed Gallery
# =============================================================================
# Builds the public gallery straight from the files in the storage bucket,
# so new uploads show up without touching the artworks table.
#
# GalleryRefresher re-lists the bucket on a fixed interval in the background
# and keeps the latest snapshot for the API to serve. A tick is skipped while
# the previous refresh is still running.
# =============================================================================

import asyncio
import logging
from datetime import datetime, timezone

from core.models.gallery import GalleryItem, GallerySnapshot
from core.services.storage_service import StorageService

logger = logging.getLogger(__name__)


def derive_title(filename: str, index: int) -> str:
    """
    Display title for a storage filename.

    Takes the second "-"-separated part without its extension, e.g.
    "1718000000000-sunset.png" -> "sunset". Falls back to "Artwork <index+1>"
    when there is no such part.
    """
    parts = filename.split("-")
    if len(parts) > 1:
        title = parts[1].split(".")[0]
        if title:
            return title
    return f"Artwork {index + 1}"


class GalleryService:
    """Lists gallery images from storage."""

    @staticmethod
    def list_items() -> list[GalleryItem]:
        """
        List every image in the bucket as a gallery item.

        Hidden entries (names starting with ".", such as folder placeholders)
        are skipped. Returns [] if listing fails.
        """
        files = [f for f in StorageService.list_files() if f.get("name") and not f["name"].startswith(".")]

        items: list[GalleryItem] = []
        for index, file_info in enumerate(files):
            name = file_info["name"]
            try:
                url = StorageService.get_public_url(name)
            except Exception:
                # logged by StorageService
                continue
            items.append(GalleryItem(id=name, title=derive_title(name, index), image_url=url))

        logger.debug(f"Gallery listing: {len(items)} items")
        return items


class GalleryRefresher:
    """
    Periodically refreshes the gallery listing.

    Usage (inside the app lifespan):
        refresher = GalleryRefresher(interval_seconds=10)
        refresher.start()
        ...
        await refresher.stop()
    """

    def __init__(self, interval_seconds: float):
        self.interval_seconds = interval_seconds
        self._snapshot = GallerySnapshot()
        self._inflight: asyncio.Task | None = None
        self._loop_task: asyncio.Task | None = None
        self.skipped_ticks = 0

    @property
    def snapshot(self) -> GallerySnapshot:
        return self._snapshot

    @property
    def refresh_in_flight(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    async def refresh(self) -> GallerySnapshot:
        """List the bucket now (in a worker thread) and store the result."""
        items = await asyncio.to_thread(GalleryService.list_items)
        self._snapshot = GallerySnapshot(items=items, refreshed_at=datetime.now(timezone.utc))
        return self._snapshot

    def tick(self) -> bool:
        """
        Start a refresh unless one is already running.

        Returns:
            True if a refresh was started, False if the tick was skipped
        """
        if self.refresh_in_flight:
            self.skipped_ticks += 1
            logger.debug("Gallery refresh still in flight, skipping tick")
            return False
        self._inflight = asyncio.create_task(self._safe_refresh())
        return True

    async def _safe_refresh(self) -> None:
        try:
            await self.refresh()
        except Exception as e:
            logger.error(f"Gallery refresh failed: {e}")

    async def _run(self) -> None:
        logger.info(f"Gallery refresher started (every {self.interval_seconds}s)")
        while True:
            self.tick()
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        if self._loop_task is None:
            self._loop_task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        for task in (self._loop_task, self._inflight):
            if task is not None and not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        self._loop_task = None
        self._inflight = None
        logger.info("Gallery refresher stopped")
