"""Startup and shutdown steps run by the application lifespan."""

import asyncio
import logging

from wishlist.core.config import Settings
from wishlist.core.database import async_session_maker, create_tables
from wishlist.core.logging import configure_logging, get_logger
from wishlist.services.auth import AuthService
from wishlist.services.revocations import delete_expired_revocations, load_revocations
from wishlist.services.token_blacklist import TokenBlacklist

_logger = get_logger("lifespan")


def task_done_callback(task: asyncio.Task[None]) -> None:
    """Log unhandled exceptions from background tasks."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        _logger.error(f"Background task {task.get_name()} failed: {exc}")


async def token_blacklist_cleanup_loop(
    blacklist: TokenBlacklist,
    interval_seconds: float,
    logger: logging.Logger,
) -> None:
    """Periodically sweep the in-memory blacklist and prune persisted entries."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            blacklist.sweep()
            async with async_session_maker() as db:
                removed = await delete_expired_revocations(db)
                await db.commit()
                if removed > 0:
                    logger.info(f"Cleaned up {removed} expired revoked token rows")
        except Exception:
            logger.exception("Error cleaning up token blacklist")


async def common_startup(
    config: Settings,
    blacklist: TokenBlacklist,
    logger: logging.Logger,
) -> list[asyncio.Task]:
    """Startup sequence.

    Configures logging, creates tables, restores revocations, bootstraps the
    admin account and starts the background sweep. Returns the background
    tasks that ``common_shutdown`` must cancel.
    """
    configure_logging(config)

    await create_tables()

    async with async_session_maker() as db:
        restored = await load_revocations(db, blacklist)
        if restored:
            logger.info(f"Restored {restored} revoked tokens")

        if config.admin.enabled:
            await AuthService(db).ensure_admin(config.admin.name, config.admin.password)

    for warning in config.check_security_configuration():
        logger.warning(f"SECURITY: {warning}")

    tasks: list[asyncio.Task] = []
    sweep_task = asyncio.create_task(
        token_blacklist_cleanup_loop(blacklist, config.blacklist_sweep_interval_seconds, logger),
        name="token-blacklist-cleanup",
    )
    sweep_task.add_done_callback(task_done_callback)
    tasks.append(sweep_task)
    return tasks


async def common_shutdown(logger: logging.Logger, tasks: list[asyncio.Task]) -> None:
    """Cancel background tasks and wait for them to finish."""
    for task in tasks:
        if task:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    logger.info("Shutdown complete")
