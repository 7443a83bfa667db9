"""Pending composition buffer: the text and images not yet sent."""

import logging

from plantcare.chat.attachments import (
    Attachment,
    PreviewRegistry,
    SelectionResult,
    merge_selection,
    remove_at,
)
from plantcare.chat.config import ClientConfig, get_client_config

logger = logging.getLogger(__name__)


class Composer:
    """Holds the draft message until it is submitted.

    Attachments held here are owned by the composer. :meth:`take` hands
    them over to a message; :meth:`clear` and :meth:`remove` release their
    previews.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        registry: PreviewRegistry | None = None,
    ) -> None:
        self._config = config or get_client_config()
        self.registry = registry or PreviewRegistry()
        self.text: str = ""
        self._attachments: list[Attachment] = []

    @property
    def attachments(self) -> tuple[Attachment, ...]:
        return tuple(self._attachments)

    @property
    def has_content(self) -> bool:
        """Whether the draft may be submitted (text or at least one image)."""
        return bool(self.text.strip()) or bool(self._attachments)

    @property
    def is_full(self) -> bool:
        return len(self._attachments) >= self._config.max_attachments

    def select(self, candidates: list[Attachment]) -> SelectionResult:
        """Apply a file selection event to the held attachments."""
        result = merge_selection(
            self._attachments,
            candidates,
            max_count=self._config.max_attachments,
            max_bytes=self._config.max_attachment_bytes,
        )
        self._attachments = list(result.held)
        return result

    def remove(self, index: int) -> None:
        """Remove the attachment at ``index`` and release its preview."""
        self._attachments = remove_at(self._attachments, index)

    def take(self) -> tuple[str, list[Attachment]]:
        """Snapshot the draft and reset the buffer.

        Ownership of the attachments moves to the caller, so their previews
        are left untouched.

        Returns:
            Trimmed text and the held attachments in order.
        """
        text, attachments = self.text.strip(), list(self._attachments)
        self.text = ""
        self._attachments = []
        return text, attachments

    def clear(self) -> None:
        """Discard the draft, releasing every held preview."""
        for attachment in self._attachments:
            attachment.release_preview()
        self._attachments = []
        self.text = ""
