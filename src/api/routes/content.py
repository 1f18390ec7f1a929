"""
Content API routes.

Renders inline markup for live previews.
"""

from fastapi import APIRouter, Depends

from src.api.deps import get_rules
from src.api.schemas import PreviewRequest
from src.components.markup import MarkupConfig, process_content
from src.domain.entities import ProcessedContent
from src.rules.models import Rules

router = APIRouter()


@router.post("/preview", response_model=ProcessedContent)
def preview_content(
    request: PreviewRequest,
    rules: Rules = Depends(get_rules),
) -> ProcessedContent:
    """Render a body the way it will be displayed once published."""
    return process_content(request.body, MarkupConfig.from_rules(rules.markup))
