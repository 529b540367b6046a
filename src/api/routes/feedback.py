"""
Configuration feedback route.

Records an upvote/downvote on one generated section as an analytics event.
"""

from typing import Dict

from fastapi import APIRouter, Depends, Request

from api.errors import APIError
from core.auth import BasicUser, require_auth
from core.logging import get_logger
from relevance.analytics import FEEDBACK_EVENT, get_analytics
from relevance.models import ConfigurationFeedbackRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Feedback"])


@router.post("/configuration-feedback", summary="Record feedback on a generated configuration")
def configuration_feedback(
    body: ConfigurationFeedbackRequest,
    request: Request,
    user: BasicUser = Depends(require_auth),
) -> Dict[str, str]:
    try:
        get_analytics().track_event(
            FEEDBACK_EVENT,
            {
                "indexName": body.index_name,
                "appId": body.app_id,
                "configurationType": body.configuration_type.value,
                "feedback": body.feedback,
                "explanation": body.explanation,
                "generatedConfig": body.generated_config,
            },
            client_ip=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
            referer=request.headers.get("referer"),
        )
    except Exception as e:
        logger.error("Configuration feedback error", error=str(e))
        raise APIError(str(e) or "Failed to record feedback")

    logger.info(
        "Configuration feedback received",
        index=body.index_name,
        configuration_type=body.configuration_type.value,
        feedback=body.feedback,
    )
    return {"message": "Feedback recorded successfully"}
