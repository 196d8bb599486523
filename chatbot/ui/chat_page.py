"""NiceGUI chat interface with simulated SSE streaming."""

import asyncio
import html
import logging
import os
from collections.abc import Coroutine
from typing import Any

import httpx
from nicegui import ui

from chatbot.conversation.session import ChatSession
from chatbot.models.schemas import Message, Role
from chatbot.ui.stream_client import API_BASE_URL, stream_chat_response

logger = logging.getLogger(__name__)


def escape_text(text: str) -> str:
    """Escape message text for HTML display, keeping line breaks."""
    return html.escape(text).replace("\n", "<br>")


def format_count(value: int) -> str:
    """Format a stats counter: exact below 1000, then thousands with one decimal."""
    if value < 1000:
        return str(value)
    return f"{value / 1000:.1f}K"


def shows_copy_button(msg: Message) -> bool:
    """Only finished assistant replies can be copied."""
    return msg.role == Role.ASSISTANT and not msg.is_typing


class TurnTracker:
    """The one running reply task of a page, and which turns the user stopped.

    Each ``send_message`` call holds on to its own task, so a stopped turn
    finishing late cannot clear or fail the turn that replaced it.
    """

    def __init__(self) -> None:
        self.task: asyncio.Task | None = None
        self._stopped: set[asyncio.Task] = set()

    def start(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task:
        self.task = asyncio.create_task(coro)
        return self.task

    def stop(self) -> None:
        """Cancel the current turn, marking the cancellation as user intent."""
        if self.task is not None:
            self._stopped.add(self.task)
            self.task.cancel()

    def was_stopped(self, task: asyncio.Task) -> bool:
        return task in self._stopped

    def finish(self, task: asyncio.Task) -> bool:
        """Forget ``task``. Returns True if it was still the current turn."""
        self._stopped.discard(task)
        if self.task is not task:
            return False
        self.task = None
        return True


CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<link href="https://fonts.googleapis.com/icon?family=Material+Icons" rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #f5f5f5; min-height: 100vh; }

    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }

    .header { background: linear-gradient(135deg, #7c3aed 0%, #2563eb 100%); }

    .message-user {
        background: linear-gradient(135deg, #7c3aed 0%, #2563eb 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
        white-space: normal;
    }

    .avatar-user { background: linear-gradient(135deg, #7c3aed 0%, #2563eb 100%); }
    .avatar-assistant { background: #6b7280; }

    .typing-dot {
        width: 8px; height: 8px;
        background: #7c3aed;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.15s; }
    .typing-dot:nth-child(3) { animation-delay: 0.3s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .cursor::after { content: '▍'; animation: blink 1s step-start infinite; }
    @keyframes blink { 50% { opacity: 0; } }

    .input-box {
        background: #f9fafb;
        border: 1px solid #e5e7eb;
        border-radius: 12px;
        transition: border-color 0.2s;
    }
    .input-box:focus-within { border-color: #7c3aed; }

    .send-btn { background: linear-gradient(135deg, #7c3aed 0%, #2563eb 100%) !important; }
</style>
"""

STATUS_MESSAGES = {
    "received": "AI Chatbot is thinking...",
    "generating": "Generating response...",
}


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    session = ChatSession()
    turns = TurnTracker()

    messages_container: ui.column
    stats_panel: ui.row
    settings_panel: ui.column
    error_banner: ui.row
    error_label: ui.label
    count_label: ui.label
    input_field: ui.textarea
    send_btn: ui.button
    stop_btn: ui.button
    response_label: ui.html | None = None

    def render_avatar(is_user: bool) -> None:
        css = "avatar-user" if is_user else "avatar-assistant"
        icon = "person" if is_user else "smart_toy"
        avatar_classes = f"w-9 h-9 rounded-full flex items-center justify-center {css}"
        with ui.element("div").classes(avatar_classes):
            ui.icon(icon).classes("text-white text-lg")

    def render_message(msg: Message) -> ui.html:
        is_user = msg.role == Role.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"

        with ui.row().classes(f"w-full {align} gap-3 items-end"):
            if not is_user:
                render_avatar(False)
            with ui.column().classes("max-w-[70%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    label = ui.html(escape_text(msg.content), sanitize=False).classes(
                        "text-sm leading-relaxed"
                    )
                    if msg.is_typing:
                        label.classes("cursor")
                with ui.row().classes(
                    f"items-center gap-1 {'self-end' if is_user else 'self-start'}"
                ):
                    ui.label(msg.timestamp.strftime("%I:%M %p")).classes(
                        "text-[10px] text-gray-400"
                    )
                    if shows_copy_button(msg):
                        ui.button(
                            icon="content_copy", on_click=lambda: copy_message(msg)
                        ).props("flat round dense size=xs color=grey").tooltip("Copy message")
            if is_user:
                render_avatar(True)
        return label

    def copy_message(msg: Message) -> None:
        ui.clipboard.write(msg.content)
        ui.notify("Copied to clipboard", type="positive")

    def render_typing_indicator() -> ui.label:
        """Render the animated dots shown while a reply is awaited."""
        with ui.row().classes("w-full justify-start gap-3 items-end"):
            render_avatar(False)
            with ui.element("div").classes("message-assistant px-4 py-3"):
                with ui.row().classes("items-center gap-2"):
                    with ui.row().classes("gap-1"):
                        for _ in range(3):
                            ui.element("div").classes("typing-dot")
                    status_label = ui.label(STATUS_MESSAGES["received"]).classes(
                        "text-sm text-gray-500 italic"
                    )
        return status_label

    def refresh_messages() -> ui.label | None:
        """Redraw every message; returns the typing status label if shown."""
        nonlocal response_label
        response_label = None
        status_label = None
        messages_container.clear()
        with messages_container:
            for msg in session.messages:
                label = render_message(msg)
                if msg.id == session.streaming_message_id:
                    response_label = label
            if session.is_loading:
                status_label = render_typing_indicator()
        return status_label

    def refresh_controls() -> None:
        busy = session.is_busy
        send_btn.set_visibility(not busy)
        stop_btn.set_visibility(session.is_generating)
        if busy:
            input_field.disable()
        else:
            input_field.enable()

        stats = session.stats()
        count_label.set_text(f"{stats.total_messages} messages")
        stats_panel.clear()
        with stats_panel:
            for value, caption in (
                (stats.user_messages, "Your Messages"),
                (stats.assistant_messages, "AI Responses"),
                (stats.in_memory, "In Memory"),
                (stats.characters, "Characters"),
            ):
                with ui.column().classes("items-center gap-0"):
                    ui.label(format_count(value)).classes("text-2xl font-bold text-purple-600")
                    ui.label(caption).classes("text-xs text-gray-500")

        error_banner.set_visibility(session.error is not None)
        error_label.set_text(session.error or "")

    def refresh_all() -> ui.label | None:
        status_label = refresh_messages()
        refresh_controls()
        return status_label

    async def send_message() -> None:
        message = session.submit(input_field.value or "")
        if message is None:
            return

        input_field.value = ""
        history = session.history_before(message.id)
        status_label = refresh_all()

        def on_status(status: str) -> None:
            if status_label is not None and status in STATUS_MESSAGES:
                status_label.set_text(STATUS_MESSAGES[status])

        def on_chunk(content: str) -> None:
            first = session.streaming_message is None
            streaming = session.append_chunk(content)
            if first or response_label is None:
                refresh_messages()
            else:
                response_label.set_content(escape_text(streaming.content))

        def on_complete() -> None:
            session.complete_response()
            refresh_all()

        def on_error(error: str) -> None:
            session.fail(error)
            refresh_all()
            ui.notify(error, type="negative")

        turn = turns.start(
            stream_chat_response(
                message.content, history, on_chunk, on_status, on_complete, on_error
            )
        )
        try:
            await turn
        except asyncio.CancelledError:
            if not turns.was_stopped(turn):
                raise
        finally:
            stopped = turns.was_stopped(turn)
            if turns.finish(turn):
                if session.is_busy and not stopped:
                    session.fail("An unexpected error occurred")
                refresh_all()

    def stop_generation() -> None:
        session.stop_generation()
        turns.stop()
        refresh_all()

    def clear_chat() -> None:
        stop_generation()
        session.clear()
        refresh_all()

    def dismiss_error() -> None:
        session.dismiss_error()
        refresh_controls()

    async def toggle_settings() -> None:
        if settings_panel.visible:
            settings_panel.set_visibility(False)
            return
        try:
            async with httpx.AsyncClient(timeout=10.0) as client:
                response = await client.get(f"{API_BASE_URL}/chat/settings")
                response.raise_for_status()
                settings = response.json()
        except httpx.HTTPError as e:
            logger.warning(f"Could not load model settings: {e!r}")
            ui.notify("Could not load model settings", type="warning")
            return
        settings_panel.clear()
        with settings_panel:
            ui.label("Model Configuration").classes("font-semibold")
            ui.label(f"Model: {settings['model']}").classes("text-sm")
            ui.label(f"Temperature: {settings['temperature']}").classes("text-sm")
            ui.label(f"Max Tokens: {settings['max_output_tokens']}").classes("text-sm")
            ui.label(
                f"Context Window: {settings['history_window']} messages"
            ).classes("text-sm")
        settings_panel.set_visibility(True)

    # === UI Layout ===
    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-4xl mx-auto app-container").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        # Header
        with ui.column().classes("w-full header px-5 py-4 gap-2"):
            with ui.row().classes("w-full items-center justify-between"):
                with ui.row().classes("items-center gap-3"):
                    ui.icon("psychology").classes("text-white text-3xl")
                    with ui.column().classes("gap-0"):
                        ui.label("AI Chatbot").classes("text-lg font-semibold text-white")
                        count_label = ui.label().classes("text-xs text-white/80")
                with ui.row().classes("items-center gap-1"):
                    stop_btn = ui.button("Stop", icon="stop", on_click=stop_generation).props(
                        "flat color=white"
                    )
                    ui.button(
                        icon="insights",
                        on_click=lambda: stats_panel.set_visibility(not stats_panel.visible),
                    ).props("flat round color=white")
                    ui.button(icon="settings", on_click=toggle_settings).props(
                        "flat round color=white"
                    )
                    ui.button(icon="delete", on_click=clear_chat).props(
                        "flat round color=white"
                    )
            stats_panel = ui.row().classes("w-full bg-white rounded-xl p-4 justify-around")
            stats_panel.set_visibility(False)
            settings_panel = ui.column().classes("w-full bg-white rounded-xl p-4 gap-1")
            settings_panel.set_visibility(False)

        # Error banner
        with ui.row().classes(
            "w-full items-center justify-between bg-red-50 border-l-4 border-red-400 px-4 py-2"
        ) as error_banner:
            with ui.row().classes("items-center gap-2"):
                ui.icon("error_outline").classes("text-red-400")
                error_label = ui.label().classes("text-sm text-red-800")
            ui.button(icon="close", on_click=dismiss_error).props("flat round dense color=red")

        # Messages
        with (
            ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
            ui.column().classes("w-full p-5"),
        ):
            messages_container = ui.column().classes("w-full gap-4")

        # Input
        with ui.row().classes("w-full p-4 gap-3 items-end bg-white border-t"):
            with ui.element("div").classes("flex-grow input-box px-3 py-2"):
                input_field = (
                    ui.textarea(placeholder="Ask me anything...")
                    .props("autogrow borderless dense rows=1")
                    .classes("w-full")
                    .on("keydown.enter.exact.prevent", send_message)
                )
            send_btn = (
                ui.button(icon="send", on_click=send_message)
                .props("round unelevated")
                .classes("send-btn")
            )

    refresh_all()


def main() -> None:
    """Serve the page on its own, talking to the API at ``API_BASE_URL``."""
    ui.run(
        title="AI Chatbot",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("UI_PORT", "8080")),
        reload=False,
    )


if __name__ == "__main__":
    main()
