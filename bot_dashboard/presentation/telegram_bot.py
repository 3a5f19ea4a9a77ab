# bot_dashboard/presentation/telegram_bot.py
import asyncio
import logging
from telegram.ext import Application, CommandHandler, CallbackQueryHandler

from ..infrastructure.telegram.bot_handlers import TelegramBotHandlers

logger = logging.getLogger(__name__)


class TelegramBotApplication:
    """Manages the Telegram dashboard bot setup and execution."""

    def __init__(self, token: str, handlers_class: TelegramBotHandlers):
        if not token:
            raise ValueError("Telegram bot token is required.")
        self.token = token
        self.handlers = handlers_class
        self.application = Application.builder().token(self.token).build()
        self._setup_handlers()

    def _setup_handlers(self) -> None:
        """Setup command and callback handlers."""
        self.application.add_handler(CommandHandler("start", self.handlers.start_handler))
        self.application.add_handler(CommandHandler("workspaces", self.handlers.workspaces_handler))
        self.application.add_handler(CommandHandler("summary", self.handlers.summary_handler))
        self.application.add_handler(CallbackQueryHandler(self.handlers.callback_handler))
        logger.info("Telegram bot handlers configured.")

    async def run(self) -> None:
        """Start the Telegram bot polling and keep it alive until cancelled."""
        logger.info("Starting Dashboard Telegram Bot...")
        try:
            await self.application.initialize()
            await self.application.start()
            await self.application.updater.start_polling()
            logger.info("Dashboard Telegram Bot started successfully.")
            while True:
                await asyncio.sleep(3600)
        finally:
            logger.info("Stopping Dashboard Telegram Bot...")
            if self.application.updater and self.application.updater.running:
                await self.application.updater.stop()
            if self.application.running:
                await self.application.stop()
            await self.application.shutdown()
            logger.info("Dashboard Telegram Bot stopped.")
