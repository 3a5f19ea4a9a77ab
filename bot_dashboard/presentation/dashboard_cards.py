# bot_dashboard/presentation/dashboard_cards.py
from typing import List, Optional

from telegram.helpers import escape_markdown

from ..domain.models import DashboardSummary, Workspace

# (summary field, card title, description)
SUMMARY_CARDS = [
    ("total_active_bots", "🤖 Active Bots", "latest month per workspace"),
    ("total_users", "👥 Total Users", "latest month per workspace"),
    ("total_sessions", "💬 Sessions", "all months"),
    ("total_tickets_handled", "🎫 Tickets Handled", "all months"),
    ("total_decommissioned_bots", "⚠️ Decommissioned", "all months"),
]


def render_summary(summary: DashboardSummary, workspace: Optional[Workspace] = None) -> str:
    """Render the dashboard stat cards as a Markdown message."""
    if workspace is None:
        title = "🌍 **Overview**\nGlobal insights across all workspaces."
    else:
        title = f"🏢 **{escape_markdown(workspace.name)}**\nWorkspace `{workspace.id}`"
    lines = [title, ""]
    for field, card_title, description in SUMMARY_CARDS:
        lines.append(f"**{card_title}:** {getattr(summary, field):,} _({description})_")
    return "\n".join(lines)


def render_workspace_list(workspaces: List[Workspace]) -> str:
    if not workspaces:
        return "📋 No workspaces found."
    message = "🏢 **Workspaces:**\n\n"
    for ws in workspaces:
        message += f"**{escape_markdown(ws.name)}** (ID: `{ws.id}`)\n"
    return message
