# main.py - Dashboard API server with optional Telegram bot
import asyncio
import logging
from typing import Optional

import uvicorn

from bot_dashboard.config.settings import settings, Settings
from bot_dashboard.domain.interfaces import IMetricsRepository, IDashboardService
from bot_dashboard.infrastructure.database.sqlite_repositories import SQLiteMetricsRepository
from bot_dashboard.infrastructure.database.json_repository import JsonFileMetricsRepository
from bot_dashboard.application.services.dashboard_service import DashboardService
from bot_dashboard.application.use_cases.dashboard_charts import DashboardChartsUseCase
from bot_dashboard.infrastructure.http.dashboard_server import DashboardHttpServer
from bot_dashboard.infrastructure.telegram.bot_handlers import TelegramBotHandlers
from bot_dashboard.presentation.telegram_bot import TelegramBotApplication


def configure_logging():
    """Configures application-wide logging."""
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=settings.LOG_LEVEL
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("telegram.ext").setLevel(logging.INFO)
    logging.getLogger("uvicorn").setLevel(logging.INFO)


def build_repository(config: Settings) -> IMetricsRepository:
    """Create the metrics repository selected by STORAGE_BACKEND."""
    if config.STORAGE_BACKEND == "json":
        return JsonFileMetricsRepository(data_path=config.DATA_FILE)
    return SQLiteMetricsRepository(db_path=config.DATABASE_PATH)


def initialize_components(config: Settings = settings):
    """Initialize all application components. Returns the HTTP server and the optional bot."""
    logger = logging.getLogger(__name__)
    logger.info("Initializing application components...")

    # 1. Initialize Repository
    metrics_repo = build_repository(config)
    logger.info(f"Repository initialized ({config.STORAGE_BACKEND}).")

    # 2. Initialize Services and Use Cases
    dashboard_service: IDashboardService = DashboardService(metrics_repo=metrics_repo)
    charts = DashboardChartsUseCase(metrics_repo=metrics_repo)
    logger.info("Services initialized.")

    # 3. Initialize HTTP Server
    http_server = DashboardHttpServer(
        dashboard_service=dashboard_service,
        charts=charts,
        api_key=config.API_KEY
    )
    logger.info("HTTP Dashboard Server initialized.")

    # 4. Initialize Telegram Bot
    telegram_bot_app: Optional[TelegramBotApplication] = None
    if config.DASHBOARD_BOT_TOKEN:
        handlers = TelegramBotHandlers(
            dashboard_service=dashboard_service,
            charts=charts,
            admin_user_ids=config.ADMIN_USER_IDS
        )
        telegram_bot_app = TelegramBotApplication(token=config.DASHBOARD_BOT_TOKEN, handlers_class=handlers)
        logger.info("Telegram Bot Application initialized.")
    else:
        logger.info("DASHBOARD_BOT_TOKEN not set, Telegram bot disabled.")

    return http_server, telegram_bot_app


async def main_async():
    """Main async function."""
    configure_logging()
    settings.log_summary()
    logger = logging.getLogger(__name__)

    http_server, telegram_bot_app = initialize_components()
    telegram_task: Optional[asyncio.Task] = None

    try:
        if telegram_bot_app:
            logger.info("Starting Telegram bot...")
            telegram_task = asyncio.create_task(telegram_bot_app.run())

        config = uvicorn.Config(
            app=http_server.app,
            host=settings.HTTP_HOST,
            port=settings.HTTP_PORT,
            log_level="info"
        )
        server = uvicorn.Server(config)

        logger.info(f"Starting HTTP server on http://{settings.HTTP_HOST}:{settings.HTTP_PORT}")
        await server.serve()
    finally:
        logger.info("Application shutdown sequence initiated.")
        if telegram_task:
            telegram_task.cancel()
            try:
                await telegram_task
            except asyncio.CancelledError:
                pass
        logger.info("Application finished.")


if __name__ == "__main__":
    try:
        asyncio.run(main_async())
    except KeyboardInterrupt:
        logging.getLogger(__name__).info("Application shutting down due to KeyboardInterrupt...")
