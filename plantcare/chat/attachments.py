"""Image attachments, their preview handles, and selection validation.

An attachment owns its bytes. Its preview (a ``data:`` URL the browser can
show) is created lazily and must be released when the attachment is removed
from the composer or when the message holding it is discarded. The
:class:`PreviewRegistry` tracks live previews so leaks are observable.
"""

import base64
import logging

from pydantic import BaseModel, ConfigDict

from plantcare.chat.config import MAX_ATTACHMENT_BYTES, MAX_ATTACHMENTS

logger = logging.getLogger(__name__)

INVALID_SELECTION_WARNING = "Please select valid image files (max 10MB each)."


class PreviewHandle:
    """A revocable preview URL for one attachment."""

    def __init__(self, registry: "PreviewRegistry", url: str) -> None:
        self._registry = registry
        self._url: str | None = url

    @property
    def url(self) -> str:
        if self._url is None:
            raise RuntimeError("Preview handle has been released")
        return self._url

    @property
    def released(self) -> bool:
        return self._url is None

    def release(self) -> None:
        """Free the preview. Releasing twice is a no-op."""
        if self._url is None:
            return
        self._url = None
        self._registry.discard(self)


class PreviewRegistry:
    """Book-keeping for preview handles that have not been released yet."""

    def __init__(self) -> None:
        self._live: set[PreviewHandle] = set()

    @property
    def live_count(self) -> int:
        return len(self._live)

    def acquire(self, attachment: "Attachment") -> PreviewHandle:
        encoded = base64.b64encode(attachment.data).decode("ascii")
        handle = PreviewHandle(self, f"data:{attachment.mime_type};base64,{encoded}")
        self._live.add(handle)
        return handle

    def discard(self, handle: PreviewHandle) -> None:
        self._live.discard(handle)


class Attachment:
    """An image selected by the user.

    Attributes:
        data: Raw file bytes.
        mime_type: Declared content type, e.g. ``image/jpeg``.
        name: Original filename, used as the multipart filename.
        size_bytes: File size; defaults to ``len(data)``.
    """

    def __init__(
        self,
        data: bytes,
        mime_type: str,
        name: str = "image",
        size_bytes: int | None = None,
    ) -> None:
        self.data = data
        self.mime_type = mime_type or ""
        self.name = name or "image"
        self.size_bytes = len(data) if size_bytes is None else size_bytes
        self._preview: PreviewHandle | None = None

    def __repr__(self) -> str:
        return f"Attachment(name={self.name!r}, mime_type={self.mime_type!r}, size_bytes={self.size_bytes})"

    @property
    def has_preview(self) -> bool:
        return self._preview is not None and not self._preview.released

    def preview_url(self, registry: PreviewRegistry) -> str:
        """Return the preview URL, acquiring a handle on first use."""
        if not self.has_preview:
            self._preview = registry.acquire(self)
        return self._preview.url

    def release_preview(self) -> None:
        if self._preview is not None:
            self._preview.release()
            self._preview = None


class SelectionResult(BaseModel):
    """Outcome of merging a new file selection into the held attachments.

    Attributes:
        held: The new held set, at most ``max_count`` valid images.
        rejected: Candidates dropped for type or size.
        warning: User-facing warning when the whole batch was invalid.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    held: list[Attachment]
    rejected: list[Attachment]
    warning: str | None = None


def is_valid_attachment(
    attachment: Attachment, max_bytes: int = MAX_ATTACHMENT_BYTES
) -> bool:
    """Check the type and size limits for a single image."""
    return attachment.mime_type.startswith("image/") and attachment.size_bytes <= max_bytes


def merge_selection(
    held: list[Attachment],
    candidates: list[Attachment],
    max_count: int = MAX_ATTACHMENTS,
    max_bytes: int = MAX_ATTACHMENT_BYTES,
) -> SelectionResult:
    """Merge a selection event into the held attachments.

    Held items come first, then candidates in encounter order. Invalid items
    are dropped and the survivors are capped at ``max_count``, earlier items
    winning. If every candidate is invalid the held set is returned as is,
    together with a warning.

    Args:
        held: Attachments currently in the composer.
        candidates: Files from the new selection event.
        max_count: Maximum number of attachments to keep.
        max_bytes: Maximum size of a single attachment.

    Returns:
        SelectionResult with the new held set.
    """
    rejected = [a for a in candidates if not is_valid_attachment(a, max_bytes)]
    for attachment in rejected:
        logger.warning(
            f"Rejected attachment {attachment.name} "
            f"({attachment.mime_type or 'unknown type'}, {attachment.size_bytes} bytes)"
        )

    if candidates and len(rejected) == len(candidates):
        return SelectionResult(
            held=list(held), rejected=rejected, warning=INVALID_SELECTION_WARNING
        )

    survivors = [a for a in [*held, *candidates] if is_valid_attachment(a, max_bytes)]
    if len(survivors) > max_count:
        logger.info(f"Attachment limit reached, dropping {len(survivors) - max_count} image(s)")

    return SelectionResult(held=survivors[:max_count], rejected=rejected)


def remove_at(held: list[Attachment], index: int) -> list[Attachment]:
    """Return the held set without the item at ``index``, releasing its preview.

    The remaining items are kept as they are, without re-validation.

    Raises:
        IndexError: If ``index`` is out of range.
    """
    if not 0 <= index < len(held):
        raise IndexError(f"No attachment at position {index}")
    removed = held[index]
    removed.release_preview()
    return held[:index] + held[index + 1 :]
