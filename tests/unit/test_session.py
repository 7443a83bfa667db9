"""Unit tests for the chat session state machine."""

import asyncio

import pytest
import pytest_check as check

from plantcare.chat.composer import Composer
from plantcare.chat.errors import ServerReportedError, TransportFailure
from plantcare.chat.messages import ConversationMessage, MessageRole
from plantcare.chat.session import ChatSession, SessionState
from plantcare.models.schemas import ChatReply
from tests.conftest import FakeTransport, make_image


class TestSubmitGuard:
    """Tests for submissions that must be rejected without side effects."""

    async def test_empty_draft_is_noop(
        self, composer: Composer, fake_transport: FakeTransport
    ) -> None:
        session = ChatSession(fake_transport)
        composer.text = "   \n "

        accepted = await session.submit(composer)

        check.is_false(accepted)
        check.equal(session.history, ())
        check.equal(fake_transport.requests, [])
        check.equal(composer.text, "   \n ")

    async def test_second_submit_while_in_flight_is_rejected(
        self, composer: Composer, fake_transport: FakeTransport
    ) -> None:
        fake_transport.gate = asyncio.Event()
        session = ChatSession(fake_transport)
        composer.text = "first"

        pending = asyncio.create_task(session.submit(composer))
        await asyncio.sleep(0)
        check.equal(session.state, SessionState.SUBMITTING)

        composer.text = "second"
        accepted = await session.submit(composer)

        check.is_false(accepted)
        check.equal(len(session.history), 1)
        check.equal(len(fake_transport.requests), 1)
        check.equal(composer.text, "second")

        fake_transport.gate.set()
        check.is_true(await pending)
        check.equal(session.state, SessionState.IDLE)

    async def test_closed_session_rejects(
        self, composer: Composer, fake_transport: FakeTransport
    ) -> None:
        session = ChatSession(fake_transport)
        session.close()
        composer.text = "hello"

        assert await session.submit(composer) is False
        assert fake_transport.requests == []


class TestSubmitSuccess:
    """Tests for the IDLE -> SUBMITTING -> IDLE happy path."""

    async def test_user_message_appended_before_request_completes(
        self, composer: Composer, fake_transport: FakeTransport
    ) -> None:
        """Listeners see the user message with the composer already cleared."""
        session = ChatSession(fake_transport)
        seen: list[tuple[MessageRole, bool, str]] = []
        session.add_listener(lambda msg: seen.append((msg.role, session.in_flight, composer.text)))
        composer.text = "  Why droopy?  "

        await session.submit(composer)

        check.equal(seen[0], (MessageRole.USER, True, ""))
        check.equal(seen[1], (MessageRole.ASSISTANT, False, ""))
        check.equal(session.history[0].text, "Why droopy?")

    async def test_failing_listener_does_not_leave_session_in_flight(
        self, composer: Composer, fake_transport: FakeTransport
    ) -> None:
        session = ChatSession(fake_transport)
        calls: list[MessageRole] = []

        def listener(msg: ConversationMessage) -> None:
            calls.append(msg.role)
            if len(calls) == 1:
                raise RuntimeError("refresh failed")

        session.add_listener(listener)
        composer.text = "first"

        with pytest.raises(RuntimeError, match="refresh failed"):
            await session.submit(composer)

        check.is_false(session.in_flight)
        check.equal(session.state, SessionState.IDLE)

        composer.text = "second"
        check.is_true(await session.submit(composer))
        check.equal(session.history[-1].role, MessageRole.ASSISTANT)
        check.equal(fake_transport.requests[-1].message, "second")

    async def test_assistant_reply_appended(self, composer: Composer) -> None:
        transport = FakeTransport([ChatReply(message="**Water** less.", session_id="abc")])
        session = ChatSession(transport)
        composer.text = "Overwatered?"

        assert await session.submit(composer) is True

        roles = [msg.role for msg in session.history]
        check.equal(roles, [MessageRole.USER, MessageRole.ASSISTANT])
        check.equal(session.history[1].text, "**Water** less.")
        check.is_false(session.in_flight)

    async def test_session_id_adopted_and_echoed(self, composer: Composer) -> None:
        """The first reply's session id is sent on the next request."""
        transport = FakeTransport([
            ChatReply(message="one", session_id="abc"),
            ChatReply(message="two", session_id="abc"),
        ])
        session = ChatSession(transport)

        composer.text = "first"
        await session.submit(composer)
        composer.text = "second"
        await session.submit(composer)

        check.is_none(transport.requests[0].session_id)
        check.equal(transport.requests[1].session_id, "abc")
        check.equal(session.session_id, "abc")

    async def test_session_id_never_changes_once_set(self, composer: Composer) -> None:
        transport = FakeTransport([
            ChatReply(message="one", session_id="abc"),
            ChatReply(message="two", session_id="other"),
        ])
        session = ChatSession(transport)

        for text in ("first", "second"):
            composer.text = text
            await session.submit(composer)

        assert session.session_id == "abc"

    async def test_reply_without_session_id(self, composer: Composer) -> None:
        transport = FakeTransport([ChatReply(message="hi"), ChatReply(message="again", session_id="late")])
        session = ChatSession(transport)

        composer.text = "one"
        await session.submit(composer)
        check.is_none(session.session_id)

        composer.text = "two"
        await session.submit(composer)
        check.equal(session.session_id, "late")

    async def test_images_move_into_history(
        self, composer: Composer, fake_transport: FakeTransport
    ) -> None:
        session = ChatSession(fake_transport)
        images = [make_image("a.jpg"), make_image("b.jpg")]
        composer.select(images)

        await session.submit(composer)

        check.equal(session.history[0].text, "")
        check.equal(list(session.history[0].attachments), images)
        check.equal(list(fake_transport.requests[0].images), images)
        check.is_none(fake_transport.requests[0].message)
        check.equal(composer.attachments, ())


class TestSubmitFailure:
    """Tests for failures turning into error messages."""

    async def test_transport_failure_appends_generic_error(self, composer: Composer) -> None:
        session = ChatSession(FakeTransport([TransportFailure()]))
        composer.text = "hello"

        assert await session.submit(composer) is True

        last = session.history[-1]
        check.equal(last.role, MessageRole.ERROR)
        check.equal(last.text, "Sorry, something went wrong. Please try again.")
        check.equal(session.state, SessionState.IDLE)

    async def test_server_error_text_is_verbatim(self, composer: Composer) -> None:
        error = ServerReportedError("AI service temporarily unavailable.", 503)
        session = ChatSession(FakeTransport([error]))
        composer.text = "hello"

        await session.submit(composer)

        assert session.history[-1].text == "AI service temporarily unavailable."

    async def test_session_usable_after_failure(self, composer: Composer) -> None:
        transport = FakeTransport([TransportFailure(), ChatReply(message="ok", session_id="s1")])
        session = ChatSession(transport)

        composer.text = "first"
        await session.submit(composer)
        composer.text = "again"
        await session.submit(composer)

        roles = [msg.role for msg in session.history]
        check.equal(
            roles,
            [MessageRole.USER, MessageRole.ERROR, MessageRole.USER, MessageRole.ASSISTANT],
        )
        check.equal(session.session_id, "s1")


class TestHistory:
    """Tests for history ownership and disposal."""

    async def test_history_is_read_only_view(
        self, composer: Composer, fake_transport: FakeTransport
    ) -> None:
        session = ChatSession(fake_transport)
        composer.text = "hi"
        await session.submit(composer)

        history = session.history

        check.is_instance(history, tuple)
        check.is_instance(history[0], ConversationMessage)

    async def test_close_releases_message_previews(
        self, composer: Composer, fake_transport: FakeTransport
    ) -> None:
        session = ChatSession(fake_transport)
        composer.select([make_image("a.jpg"), make_image("b.jpg")])
        for attachment in composer.attachments:
            attachment.preview_url(composer.registry)
        await session.submit(composer)
        check.equal(composer.registry.live_count, 2)

        session.close()
        session.close()

        check.equal(composer.registry.live_count, 0)
        check.is_true(session.closed)
