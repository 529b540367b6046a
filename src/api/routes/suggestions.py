"""
Suggestion API Routes.

Generates all four settings for a set of sample records without touching
any index.

NOTE: Routes use `def` (not `async def`) because the model SDKs and the
Algolia client are synchronous. FastAPI runs sync handlers in a thread pool.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from api.errors import APIError
from config.settings import get_settings
from core.auth import BasicUser, require_auth
from core.logging import get_logger
from relevance.costs import CostTracker
from relevance.generation import generate_configurations
from relevance.llm import create_model_client
from relevance.models import GenerateSuggestionsRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Suggestions"])


@router.post("/generate-suggestions", summary="Generate configuration suggestions")
def generate_suggestions(
    request: GenerateSuggestionsRequest,
    user: BasicUser = Depends(require_auth),
) -> Dict[str, Any]:
    """
    Suggest searchableAttributes, customRanking, attributesForFaceting and
    sortable attributes for the given records.

    Each section is {data, reasoning, attributeReasons, fallback}.
    """
    settings = get_settings()
    limit = min(request.limit or settings.default_sample_limit, settings.max_sample_records)

    try:
        model_client = create_model_client(request.model, settings)
    except ValueError as e:
        # Unsupported model or missing provider key (MissingCredentialsError)
        raise APIError(str(e), status.HTTP_400_BAD_REQUEST)

    cost_tracker = CostTracker()

    try:
        generated = generate_configurations(
            request.records,
            limit,
            model_client=model_client,
            cost_tracker=cost_tracker,
            settings=settings,
        )
    except Exception as e:
        logger.error("Error generating AI suggestions", index=request.index_name, error=str(e))
        raise APIError("Failed to generate AI suggestions")

    summary = cost_tracker.summary()
    logger.info(
        "Generated suggestions",
        index=request.index_name,
        model=generated.model_name,
        records=min(len(request.records), limit),
        cost=round(summary.total_cost, 6),
    )

    return {
        **generated.to_response(),
        "model": generated.model_name,
    }
