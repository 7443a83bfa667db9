"""NiceGUI plant care chat page with image attachments."""

from nicegui import events, ui

from plantcare.chat import (
    Attachment,
    ChatSession,
    Composer,
    ConversationMessage,
    HttpChatTransport,
    MessageRole,
    get_client_config,
)
from plantcare.ui.formatting import plain_to_html, reply_to_html

TEXT_PLACEHOLDER = "Ask me anything about plant care..."
IMAGE_PLACEHOLDER = "Ask something specific about your plant photos..."

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #f0fdf4; min-height: 100vh; }

    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }

    .header { background: linear-gradient(135deg, #22c55e 0%, #15803d 100%); }

    .message-user {
        background: linear-gradient(135deg, #22c55e 0%, #15803d 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }

    .message-error {
        background: #fef2f2;
        color: #b91c1c;
        border: 1px solid #fecaca;
        border-radius: 18px 18px 18px 4px;
    }

    .avatar-user { background: linear-gradient(135deg, #22c55e 0%, #15803d 100%); }
    .avatar-assistant { background: #6b7280; }

    .message-image, .preview-image {
        width: 96px; height: 96px;
        object-fit: cover;
        border-radius: 8px;
    }

    .spinner {
        width: 18px; height: 18px;
        border: 2px solid #bbf7d0;
        border-top-color: #16a34a;
        border-radius: 50%;
        animation: spin 1s linear infinite;
    }
    @keyframes spin { to { transform: rotate(360deg); } }

    .input-box {
        background: #f9fafb;
        border: 1px solid #e5e7eb;
        border-radius: 12px;
        transition: border-color 0.2s;
    }
    .input-box:focus-within { border-color: #22c55e; }

    .send-btn { background: linear-gradient(135deg, #22c55e 0%, #15803d 100%) !important; }

    /* Reply blocks */
    .reply-heading {
        color: #16a34a;
        font-size: 1.1em;
        font-weight: 600;
        margin: 16px 0 8px 0;
        border-bottom: 2px solid #22c55e;
        padding-bottom: 4px;
    }
    .reply-paragraph { margin: 8px 0; line-height: 1.7; }
    .reply-list { margin: 12px 0; padding-left: 20px; }
    .reply-list li { margin-bottom: 6px; line-height: 1.6; }
    .reply-callout {
        margin: 12px 0;
        padding: 10px 14px;
        background: #f0fdf4;
        border-left: 4px solid #22c55e;
        border-radius: 0 8px 8px 0;
    }
    .reply-emphasis { color: #16a34a; font-weight: 600; }
</style>
"""


def render_avatar(is_user: bool) -> None:
    css = "avatar-user" if is_user else "avatar-assistant"
    icon = "person" if is_user else "eco"
    avatar_classes = f"w-9 h-9 rounded-full flex items-center justify-center {css}"
    with ui.element("div").classes(avatar_classes):
        ui.icon(icon).classes("text-white text-lg")


def render_message(msg: ConversationMessage, composer: Composer) -> None:
    """Render one history entry. Assistant text is parsed on every render."""
    is_user = msg.role is MessageRole.USER
    align = "justify-end" if is_user else "justify-start"
    bubble = {
        MessageRole.USER: "message-user",
        MessageRole.ASSISTANT: "message-assistant",
        MessageRole.ERROR: "message-error",
    }[msg.role]

    with ui.row().classes(f"w-full {align} gap-3 items-end"):
        if not is_user:
            render_avatar(False)
        with ui.column().classes("max-w-[70%] gap-1"):
            with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                if msg.attachments:
                    with ui.row().classes("gap-2 mb-2"):
                        for attachment in msg.attachments:
                            ui.image(attachment.preview_url(composer.registry)).classes(
                                "message-image"
                            )
                if msg.role is MessageRole.ASSISTANT:
                    content = reply_to_html(msg.text)
                else:
                    content = plain_to_html(msg.text)
                if content:
                    ui.html(content, sanitize=False).classes("text-sm leading-relaxed")
            ui.label(msg.created_at.strftime("%I:%M %p")).classes(
                f"text-[10px] text-gray-400 {'self-end' if is_user else 'self-start'}"
            )
        if is_user:
            render_avatar(True)


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    config = get_client_config()
    transport = HttpChatTransport(config)
    composer = Composer(config)
    session = ChatSession(transport)

    messages_container: ui.column
    previews_container: ui.row
    input_field: ui.textarea
    upload: ui.upload
    send_btn: ui.button

    def refresh_controls() -> None:
        send_btn.set_enabled(session.can_submit(composer))
        placeholder = IMAGE_PLACEHOLDER if composer.attachments else TEXT_PLACEHOLDER
        input_field.props(f'placeholder="{placeholder}"')
        input_field.set_enabled(not session.in_flight)
        upload.set_enabled(not composer.is_full and not session.in_flight)

    def refresh_previews() -> None:
        previews_container.clear()
        with previews_container:
            for index, attachment in enumerate(composer.attachments):
                with ui.element("div").classes("relative"):
                    ui.image(attachment.preview_url(composer.registry)).classes(
                        "preview-image"
                    )
                    ui.button(
                        icon="close", on_click=lambda _, i=index: remove_image(i)
                    ).props("round dense size=xs color=red").classes(
                        "absolute top-0 right-0"
                    )
        previews_container.set_visibility(bool(composer.attachments))
        refresh_controls()

    def refresh_messages() -> None:
        messages_container.clear()
        with messages_container:
            if not session.history:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("local_florist").classes("text-5xl text-green-300")
                    ui.label("Plant Care AI Assistant").classes("text-lg text-gray-500")
                    ui.label(
                        "Ask about plant care, diseases or identification. "
                        "Attach up to 5 plant photos for the best results."
                    ).classes("text-sm text-gray-400 text-center")
            else:
                for msg in session.history:
                    render_message(msg, composer)
            if session.in_flight:
                with ui.row().classes("w-full justify-start gap-3 items-center"):
                    render_avatar(False)
                    with ui.row().classes("message-assistant px-4 py-3 items-center gap-2"):
                        ui.element("div").classes("spinner")
                        ui.label("Analyzing your plant question...").classes(
                            "text-sm text-gray-500 italic"
                        )
        refresh_controls()

    def update_draft(value: str | None) -> None:
        composer.text = value or ""
        refresh_controls()

    def on_message(msg: ConversationMessage) -> None:
        if msg.role is MessageRole.USER:
            input_field.value = ""
            refresh_previews()
        refresh_messages()
        if msg.role is MessageRole.ERROR:
            ui.notify(msg.text, type="negative")

    async def handle_upload(e: events.MultiUploadEventArguments) -> None:
        candidates = [
            Attachment(data=await file.read(), mime_type=file.content_type, name=file.name)
            for file in e.files
        ]
        upload.reset()
        result = composer.select(candidates)
        if result.warning:
            ui.notify(result.warning, type="warning")
        refresh_previews()

    def remove_image(index: int) -> None:
        composer.remove(index)
        refresh_previews()

    async def send_message() -> None:
        composer.text = input_field.value or ""
        if not session.can_submit(composer):
            return
        await session.submit(composer)

    async def new_chat() -> None:
        nonlocal session
        if session.in_flight:
            return
        old = session
        old.close()
        composer.clear()
        input_field.value = ""
        session = ChatSession(transport)
        session.add_listener(on_message)
        refresh_previews()
        refresh_messages()
        if old.session_id:
            await transport.clear_session(old.session_id)

    session.add_listener(on_message)

    # === UI Layout ===
    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-3xl mx-auto app-container").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        # Header
        with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
            with ui.row().classes("items-center gap-3"):
                ui.icon("local_florist").classes("text-white text-3xl")
                ui.label("Plant Care AI").classes("text-lg font-semibold text-white")
            ui.button(icon="add", on_click=new_chat).props("flat round color=white")

        # Messages
        with (
            ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
            ui.column().classes("w-full p-5"),
        ):
            messages_container = ui.column().classes("w-full gap-4")

        # Input
        with ui.column().classes("w-full p-4 gap-2 bg-white border-t"):
            previews_container = ui.row().classes("gap-2")
            with ui.row().classes("w-full gap-3 items-end"):
                upload = (
                    ui.upload(
                        multiple=True,
                        auto_upload=True,
                        on_multi_upload=handle_upload,
                    )
                    .props('accept="image/*" flat dense hide-upload-btn')
                    .classes("w-28")
                )
                with ui.element("div").classes("flex-grow input-box px-3 py-2"):
                    input_field = (
                        ui.textarea(placeholder=TEXT_PLACEHOLDER)
                        .props("autogrow borderless dense rows=1")
                        .classes("w-full")
                        .on("keydown.enter.exact.prevent", send_message)
                        .on_value_change(lambda e: update_draft(e.value))
                    )
                send_btn = (
                    ui.button(icon="send", on_click=send_message)
                    .props("round unelevated")
                    .classes("send-btn")
                )

    refresh_previews()
    refresh_messages()


def main() -> None:
    ui.run(title="Plant Care AI", port=8080, reload=False)


if __name__ == "__main__":
    main()
