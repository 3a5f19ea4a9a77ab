# bot_dashboard/infrastructure/telegram/bot_handlers.py
import logging
import re
from typing import List, Optional, Set

from telegram import Update, InlineKeyboardButton, InlineKeyboardMarkup
from telegram.error import BadRequest
from telegram.ext import ContextTypes

from ...application.use_cases.dashboard_charts import DashboardChartsUseCase
from ...domain.errors import RepositoryUnavailableError, WorkspaceNotFoundError
from ...domain.interfaces import IDashboardService
from ...domain.models import Workspace
from ...presentation.dashboard_cards import render_summary, render_workspace_list

logger = logging.getLogger(__name__)

WORKSPACE_BUTTON_LIMIT = 10
SUMMARY_CALLBACK = re.compile(r"summary:(all|\d+)")


class TelegramBotHandlers:
    """Telegram bot command and callback handlers."""

    def __init__(
            self,
            dashboard_service: IDashboardService,
            charts: DashboardChartsUseCase,
            admin_user_ids: List[int]
    ):
        self._dashboard_service = dashboard_service
        self._charts = charts
        self._admin_user_ids: Set[int] = set(admin_user_ids)

    def _is_admin(self, user_id: int) -> bool:
        """Check if user is admin."""
        return user_id in self._admin_user_ids

    async def _summary_message(self, workspace_id: Optional[int]) -> str:
        workspace: Optional[Workspace] = None
        if workspace_id is not None:
            workspace = await self._charts.require_workspace(workspace_id)
        summary = await self._dashboard_service.compute_summary(workspace_id)
        return render_summary(summary, workspace)

    @staticmethod
    def _summary_keyboard(workspace_id: Optional[int]) -> InlineKeyboardMarkup:
        refresh = "summary:all" if workspace_id is None else f"summary:{workspace_id}"
        return InlineKeyboardMarkup([
            [InlineKeyboardButton("🔄 Refresh", callback_data=refresh)],
            [InlineKeyboardButton("🏢 Workspaces", callback_data="workspaces")],
        ])

    async def _workspaces_view(self):
        workspaces = await self._dashboard_service.list_workspaces()
        keyboard = [[InlineKeyboardButton("🌍 Overview", callback_data="summary:all")]]
        keyboard.extend(
            [InlineKeyboardButton(f"📊 {ws.name}", callback_data=f"summary:{ws.id}")]
            for ws in workspaces[:WORKSPACE_BUTTON_LIMIT]
        )
        message = render_workspace_list(workspaces)
        if len(workspaces) > WORKSPACE_BUTTON_LIMIT:
            message += (
                f"\nButtons cover the first {WORKSPACE_BUTTON_LIMIT} of {len(workspaces)} workspaces. "
                "Use `/summary <workspace_id>` for the rest."
            )
        return message, InlineKeyboardMarkup(keyboard)

    async def start_handler(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if not update.effective_user or not self._is_admin(update.effective_user.id):
            if update.message: await update.message.reply_text("❌ Access denied. Admin only bot.")
            return

        keyboard = [
            [InlineKeyboardButton("🌍 Overview", callback_data="summary:all")],
            [InlineKeyboardButton("🏢 Workspaces", callback_data="workspaces")],
        ]
        await update.message.reply_text(
            "📊 **Bot Dashboard**\n\n"
            "**Available Commands:**\n"
            "• `/summary` - Global dashboard summary\n"
            "• `/summary <workspace_id>` - Summary for one workspace\n"
            "• `/workspaces` - List all workspaces\n\n"
            "Choose an option below:",
            parse_mode='Markdown', reply_markup=InlineKeyboardMarkup(keyboard)
        )

    async def workspaces_handler(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if not update.effective_user or not self._is_admin(update.effective_user.id):
            if update.message: await update.message.reply_text("❌ Access denied.")
            return

        try:
            message, reply_markup = await self._workspaces_view()
        except RepositoryUnavailableError as e:
            logger.error(f"Error listing workspaces in handler: {e}")
            await update.message.reply_text("❌ Metrics storage is unavailable. Please check logs.")
            return
        await update.message.reply_text(message, parse_mode='Markdown', reply_markup=reply_markup)

    async def summary_handler(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if not update.effective_user or not self._is_admin(update.effective_user.id):
            if update.message: await update.message.reply_text("❌ Access denied.")
            return

        workspace_id: Optional[int] = None
        if context.args:
            try:
                workspace_id = int(context.args[0])
            except ValueError:
                await update.message.reply_text(
                    "❌ **Usage:** `/summary [workspace_id]`\n\n"
                    "Use `/workspaces` to see available workspace IDs.",
                    parse_mode='Markdown'
                )
                return

        try:
            message = await self._summary_message(workspace_id)
        except WorkspaceNotFoundError:
            await update.message.reply_text(f"❌ Workspace `{workspace_id}` not found.", parse_mode='Markdown')
            return
        except RepositoryUnavailableError as e:
            logger.error(f"Error computing summary in handler for workspace {workspace_id}: {e}")
            await update.message.reply_text("❌ Metrics storage is unavailable. Please check logs.")
            return
        await update.message.reply_text(
            message, parse_mode='Markdown', reply_markup=self._summary_keyboard(workspace_id))

    async def callback_handler(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        query = update.callback_query
        if not query or not query.from_user or not self._is_admin(query.from_user.id):
            if query: await query.answer("❌ Access denied.", show_alert=True)
            return

        data = query.data or ""
        summary_match = SUMMARY_CALLBACK.fullmatch(data)
        try:
            if data == "workspaces":
                message, reply_markup = await self._workspaces_view()
                await query.edit_message_text(message, parse_mode='Markdown', reply_markup=reply_markup)
            elif summary_match:
                scope = summary_match.group(1)
                workspace_id = None if scope == "all" else int(scope)
                message = await self._summary_message(workspace_id)
                await query.edit_message_text(
                    message, parse_mode='Markdown', reply_markup=self._summary_keyboard(workspace_id))
            else:
                logger.warning(f"Unhandled callback data structure: {data}")
                await query.edit_message_text("❓ Unknown or unhandled action.")
            await query.answer()
        except WorkspaceNotFoundError as e:
            await query.answer(f"⚠️ {e}", show_alert=True)
        except RepositoryUnavailableError as e:
            logger.error(f"Storage error processing callback {data}: {e}")
            await query.answer("❌ Metrics storage is unavailable.", show_alert=True)
        except BadRequest as e:
            if "Message is not modified" in str(e):
                logger.debug(f"Callback {data}: Message not modified. Silently answering.")
                await query.answer()
            else:
                logger.error(f"BadRequest during callback {data}: {e}", exc_info=True)
                await query.answer("⚠️ Telegram API Error.", show_alert=True)
