"""
Forum, thread and reply routes.

Drafts arrive fully composed; each request runs one publish through a
PublishCoordinator whose persistence step inserts the row.
"""

import logging
import re
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from src.api.deps import get_current_user, get_row_store, get_rules
from src.api.schemas import DraftRequest, error_detail
from src.components.markup import MarkupConfig, process_content
from src.components.publish import PublishCoordinator, PublishOutput
from src.core.ports import RowStorePort
from src.domain.entities import EditorMode, User
from src.rules.models import Rules

logger = logging.getLogger(__name__)

router = APIRouter()


def slugify(title: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")
    return slug or "forum"


class _RowInsert:
    """Persist callback that inserts the payload plus fixed fields into one table."""

    def __init__(self, rows: RowStorePort, table: str, extra: dict[str, Any]) -> None:
        self.rows = rows
        self.table = table
        self.extra = extra
        self.row: dict[str, Any] | None = None

    async def __call__(self, payload: dict[str, Any]) -> None:
        self.row = await self.rows.insert_row(self.table, {**payload, **self.extra})


async def _publish(
    request: DraftRequest,
    mode: EditorMode,
    insert: _RowInsert,
    rules: Rules,
    as_draft: bool = False,
) -> dict[str, Any]:
    coordinator = PublishCoordinator(insert, rules.editor)
    draft = request.to_draft(mode)
    result: PublishOutput = (
        await coordinator.save_draft(draft) if as_draft else await coordinator.publish(draft)
    )

    if not result.success:
        status_code = 502 if result.state == "failed" else 422
        raise HTTPException(status_code=status_code, detail=error_detail(result.errors))

    assert insert.row is not None
    logger.info("Published %s %s", mode, insert.row["id"])
    return insert.row


async def _get_one(rows: RowStorePort, table: str, filters: dict[str, Any], label: str):
    found = await rows.query_rows(table, filters)
    if not found:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return found[0]


# --- Forums ---


@router.get("/forums")
async def list_forums(rows: RowStorePort = Depends(get_row_store)) -> list[dict[str, Any]]:
    return await rows.query_rows("forums", {})


@router.post("/forums", status_code=201)
async def create_forum(
    request: DraftRequest,
    current_user: User = Depends(get_current_user),
    rows: RowStorePort = Depends(get_row_store),
    rules: Rules = Depends(get_rules),
) -> dict[str, Any]:
    slug = slugify(request.title)
    if request.title.strip() and await rows.query_rows("forums", {"slug": slug}):
        raise HTTPException(status_code=409, detail=f"A forum named '{slug}' already exists")

    insert = _RowInsert(rows, "forums", {"slug": slug, "author_id": current_user.id})
    return await _publish(request, "forum", insert, rules)


# --- Threads ---


@router.get("/forums/{slug}/threads")
async def list_threads(
    slug: str,
    rows: RowStorePort = Depends(get_row_store),
) -> list[dict[str, Any]]:
    forum = await _get_one(rows, "forums", {"slug": slug}, "Forum")
    threads = await rows.query_rows("threads", {"forum_id": forum["id"], "publish_type": "publish"})
    # Pinned threads first, otherwise newest first
    threads.sort(key=lambda t: t["created_at"], reverse=True)
    threads.sort(key=lambda t: not t.get("flags", {}).get("pinned", False))
    return threads


@router.post("/forums/{slug}/threads", status_code=201)
async def create_thread(
    slug: str,
    request: DraftRequest,
    draft: bool = Query(False),
    current_user: User = Depends(get_current_user),
    rows: RowStorePort = Depends(get_row_store),
    rules: Rules = Depends(get_rules),
) -> dict[str, Any]:
    forum = await _get_one(rows, "forums", {"slug": slug}, "Forum")
    insert = _RowInsert(rows, "threads", {"forum_id": forum["id"], "author_id": current_user.id})
    return await _publish(request, "thread", insert, rules, as_draft=draft)


@router.get("/threads/{thread_id}")
async def get_thread(
    thread_id: str,
    rows: RowStorePort = Depends(get_row_store),
    rules: Rules = Depends(get_rules),
) -> dict[str, Any]:
    """A thread with its rendered body and its replies, oldest first."""
    thread = await _get_one(rows, "threads", {"id": thread_id}, "Thread")
    config = MarkupConfig.from_rules(rules.markup)
    replies = await rows.query_rows("replies", {"thread_id": thread_id})

    return {
        "thread": thread,
        "content": process_content(thread.get("body", ""), config).model_dump(),
        "replies": [
            {**reply, "content": process_content(reply.get("body", ""), config).model_dump()}
            for reply in sorted(replies, key=lambda r: r["created_at"])
        ],
    }


# --- Replies ---


@router.post("/threads/{thread_id}/replies", status_code=201)
async def create_reply(
    thread_id: str,
    request: DraftRequest,
    current_user: User = Depends(get_current_user),
    rows: RowStorePort = Depends(get_row_store),
    rules: Rules = Depends(get_rules),
) -> dict[str, Any]:
    thread = await _get_one(rows, "threads", {"id": thread_id}, "Thread")
    if thread.get("flags", {}).get("locked"):
        raise HTTPException(status_code=403, detail="This thread is locked")

    insert = _RowInsert(rows, "replies", {"thread_id": thread_id, "author_id": current_user.id})
    return await _publish(request, "reply", insert, rules)
