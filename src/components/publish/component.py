"""
Publish component - validates composed drafts and hands them to persistence.

State machine:
- idle → validating (publish requested)
- validating → idle (validation failed)
- validating → publishing (payload snapshotted)
- publishing → published (callback succeeded)
- publishing → failed → idle (callback raised; author may retry)
- published → idle (reset; until then further publishes are refused)

Guards:
- Title required for forum and thread drafts, not for replies
- At least one block (or the flat body) must carry content
- Empty blocks are dropped from the payload, not reported
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from src.components.editor import has_content
from src.components.markup import extract_mentions
from src.domain.entities import CATEGORIES, BlockDraft, FlatDraft, PublishState, PublishType
from src.rules.models import EditorRules

from .models import PublishOutput, PublishValidationError
from .ports import PersistCallback

logger = logging.getLogger(__name__)

DEFAULT_TITLE_MODES: tuple[str, ...] = ("forum", "thread")

Draft = BlockDraft | FlatDraft


# --- Validation ---


def _title_error() -> PublishValidationError:
    return PublishValidationError(
        code="title_required",
        message="Please enter a title",
        field="title",
    )


def _content_error() -> PublishValidationError:
    return PublishValidationError(
        code="content_required",
        message="Please add some content",
        field="content",
    )


def validate_blocks_draft(
    draft: BlockDraft,
    title_modes: Sequence[str] = DEFAULT_TITLE_MODES,
) -> list[PublishValidationError]:
    errors: list[PublishValidationError] = []

    if draft.mode in title_modes and not draft.title.strip():
        errors.append(_title_error())

    if not any(has_content(block) for block in draft.blocks):
        errors.append(_content_error())

    return errors


def validate_flat_draft(
    draft: FlatDraft,
    title_modes: Sequence[str] = DEFAULT_TITLE_MODES,
    categories: Sequence[str] = CATEGORIES,
) -> list[PublishValidationError]:
    errors: list[PublishValidationError] = []

    if not draft.body.strip():
        errors.append(_content_error())

    if draft.mode in title_modes and not draft.title.strip():
        errors.append(_title_error())

    if draft.category and draft.category not in categories:
        errors.append(
            PublishValidationError(
                code="invalid_category",
                message=f"Unknown category '{draft.category}'",
                field="category",
            )
        )

    if draft.mode != "thread" and (draft.flags.pinned or draft.flags.locked):
        errors.append(
            PublishValidationError(
                code="flags_not_allowed",
                message="Pinned and locked flags only apply to threads",
                field="flags",
            )
        )

    return errors


def validate_for_publish(
    draft: Draft,
    title_modes: Sequence[str] = DEFAULT_TITLE_MODES,
    categories: Sequence[str] = CATEGORIES,
) -> list[PublishValidationError]:
    """Validate either draft shape for its own mode."""
    if isinstance(draft, BlockDraft):
        return validate_blocks_draft(draft, title_modes)
    return validate_flat_draft(draft, title_modes, categories)


# --- Payloads ---


def build_blocks_payload(
    draft: BlockDraft,
    title_modes: Sequence[str] = DEFAULT_TITLE_MODES,
) -> dict[str, Any]:
    """Outgoing payload for a block draft; empty blocks are filtered out."""
    payload: dict[str, Any] = {}
    if draft.mode in title_modes:
        payload["title"] = draft.title

    blocks = []
    for block in draft.blocks:
        if not has_content(block):
            continue
        item: dict[str, Any] = {"kind": block.kind, "text": block.text, "order": block.order}
        if block.image is not None:
            item["image"] = block.image.model_dump()
        blocks.append(item)

    payload["blocks"] = blocks
    return payload


def build_flat_payload(
    draft: FlatDraft,
    publish_type: PublishType = "publish",
    title_modes: Sequence[str] = DEFAULT_TITLE_MODES,
) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    if draft.mode in title_modes:
        payload["title"] = draft.title

    payload.update(
        {
            "body": draft.body,
            "attachments": [image.model_dump() for image in draft.attachments],
            "tags": list(draft.tags),
            "category": draft.category,
            "cover_image": draft.cover_image,
            "publish_type": publish_type,
            "mentions": extract_mentions(draft.body),
        }
    )
    if draft.mode == "thread":
        payload["flags"] = draft.flags.model_dump()
    return payload


def build_payload(draft: Draft, title_modes: Sequence[str] = DEFAULT_TITLE_MODES) -> dict[str, Any]:
    if isinstance(draft, BlockDraft):
        return build_blocks_payload(draft, title_modes)
    return build_flat_payload(draft, "publish", title_modes)


# --- Coordinator ---


def _refused(state: PublishState) -> PublishOutput:
    if state == "published":
        error = PublishValidationError(
            code="already_published",
            message="This draft was already published; reset before publishing again",
        )
    else:
        error = PublishValidationError(
            code="publish_in_progress",
            message="A publish is already in progress",
        )
    return PublishOutput(state=state, errors=[error], success=False)


class PublishCoordinator:
    """
    Gates submission of one composing session's drafts.

    Usage:
        coordinator = PublishCoordinator(persist)
        result = await coordinator.publish(draft)
        if not result.success:
            show(result.errors[0].message)
    """

    def __init__(self, persist: PersistCallback, rules: EditorRules | None = None) -> None:
        self._persist = persist
        self._title_modes = tuple(rules.title_required_modes) if rules else DEFAULT_TITLE_MODES
        self._categories = tuple(rules.categories) if rules else CATEGORIES
        self._state: PublishState = "idle"

    @property
    def state(self) -> PublishState:
        return self._state

    async def publish(self, draft: Draft) -> PublishOutput:
        """Validate, snapshot and persist a draft. Never retries."""
        if self._state != "idle":
            return _refused(self._state)

        self._state = "validating"
        errors = validate_for_publish(draft, self._title_modes, self._categories)
        if errors:
            self._state = "idle"
            return PublishOutput(state="idle", errors=errors, success=False)

        payload = build_payload(draft.model_copy(deep=True), self._title_modes)
        return await self._send(payload)

    async def save_draft(self, draft: FlatDraft) -> PublishOutput:
        """Persist a flat draft as-is, without title or content checks."""
        if self._state != "idle":
            return _refused(self._state)

        payload = build_flat_payload(draft.model_copy(deep=True), "draft", self._title_modes)
        return await self._send(payload)

    async def _send(self, payload: dict[str, Any]) -> PublishOutput:
        self._state = "publishing"
        try:
            await self._persist(payload)
        except Exception as e:
            logger.warning("Publish failed: %s", e)
            self._state = "idle"
            return PublishOutput(
                state="failed",
                payload=payload,
                errors=[PublishValidationError(code="publish_failed", message=str(e))],
                success=False,
            )

        self._state = "published"
        return PublishOutput(state="published", payload=payload)

    def reset(self) -> None:
        """Return to idle after a successful publish (e.g. composing a new reply)."""
        self._state = "idle"
