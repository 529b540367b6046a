"""
Index API Routes.

Create an index with AI-generated settings, read and update its settings,
and browse its records. Algolia credentials come from the caller.

NOTE: Routes use `def` (not `async def`) because the Algolia SDK and model
SDKs are synchronous. FastAPI runs sync handlers in a thread pool.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from api.errors import APIError
from config.settings import get_settings
from core.auth import BasicUser, require_auth
from core.logging import get_logger
from relevance.algolia_client import IndexConfigClient
from relevance.analytics import INDEX_CREATED_EVENT, get_analytics
from relevance.generation import generate_configurations
from relevance.llm import create_model_client
from relevance.models import CreateIndexRequest, Task, UpdateSettingsRequest
from relevance.replicas import create_sort_replicas, parse_sort_replicas

logger = get_logger(__name__)

router = APIRouter(prefix="/api/indices", tags=["Indices"])


def _record_attributes(records: List[Dict[str, Any]]) -> List[str]:
    seen: Dict[str, None] = {}
    for record in records:
        for key in record:
            seen.setdefault(key, None)
    return list(seen)


def _require_credentials(app_id: Optional[str], write_api_key: Optional[str], where: str):
    if not app_id or not write_api_key:
        raise APIError(f"Missing Algolia credentials in {where}", status.HTTP_400_BAD_REQUEST)


# =============================================================================
# Create
# =============================================================================

@router.post("", summary="Create an index configured with AI suggestions")
def create_index(
    body: CreateIndexRequest,
    request: Request,
    user: BasicUser = Depends(require_auth),
) -> Dict[str, Any]:
    """
    Save records to a new index and configure it.

    Records are saved while the suggestions are generated; then the
    searchable/ranking/faceting settings are applied and sort replicas are
    created. The returned tasks can be polled with POST /api/tasks.
    """
    settings = get_settings()
    index_name = body.index_name

    try:
        model_client = create_model_client(None, settings)
    except ValueError as e:
        raise APIError(str(e), status.HTTP_400_BAD_REQUEST)

    client = IndexConfigClient(body.app_id, body.write_api_key)
    try:
        with ThreadPoolExecutor(max_workers=2) as pool:
            save_future = pool.submit(client.save_records, index_name, body.records)
            generate_future = pool.submit(
                generate_configurations,
                body.records,
                settings.default_sample_limit,
                model_client=model_client,
                settings=settings,
            )
            batches = save_future.result()
            generated = generate_future.result()

        searchable = generated.searchable_attributes.data
        ranking = generated.custom_ranking.data
        faceting = generated.attributes_for_faceting.data
        sortable = generated.sortable_attributes.data

        settings_resp = client.set_settings(index_name, {
            "searchableAttributes": searchable,
            "customRanking": ranking,
            "attributesForFaceting": faceting,
        })
        replicas = create_sort_replicas(client, index_name, sortable)

    except Exception as e:
        logger.error("Failed to create Algolia index", index=index_name, error=str(e))
        raise APIError("Failed to create index in Algolia", status.HTTP_400_BAD_REQUEST)
    finally:
        client.close()

    tasks = [
        *(Task(task_id=batch["taskID"], index_name=index_name, description="Saving records") for batch in batches),
        Task(task_id=settings_resp["taskID"], index_name=index_name, description="Configuring search settings"),
        *replicas.tasks,
    ]

    get_analytics().track_event(
        INDEX_CREATED_EVENT,
        {
            "indexName": index_name,
            "appId": body.app_id,
            "recordCount": len(body.records),
            "recordAttributes": _record_attributes(body.records),
            "generatedConfiguration": {
                "searchableAttributes": searchable,
                "customRanking": ranking,
                "attributesForFaceting": faceting,
                "sortableAttributes": sortable,
            },
        },
        client_ip=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
        referer=request.headers.get("referer"),
    )

    logger.info("Index creation started", index=index_name, tasks=len(tasks))

    return {
        "message": "Index creation started",
        "indexName": index_name,
        "tasks": [task.model_dump(by_alias=True) for task in tasks],
        "sortOptions": [option.model_dump(by_alias=True) for option in replicas.sort_options],
    }


# =============================================================================
# Settings
# =============================================================================

@router.get("/{index_name}/settings", summary="Get index settings")
def get_index_settings(
    index_name: str,
    app_id: Optional[str] = Query(None, alias="appId"),
    write_api_key: Optional[str] = Query(None, alias="writeApiKey"),
    user: BasicUser = Depends(require_auth),
) -> Dict[str, Any]:
    """Current searchable/ranking/faceting settings plus the sort replicas."""
    _require_credentials(app_id, write_api_key, "query parameters")

    try:
        with IndexConfigClient(app_id, write_api_key) as client:
            current = client.get_settings(index_name)
    except Exception as e:
        logger.error("Failed to fetch settings", index=index_name, error=str(e))
        raise APIError(str(e) or "Failed to fetch settings")

    sort_replicas = parse_sort_replicas(current.get("replicas") or [], index_name)

    return {
        "searchableAttributes": current.get("searchableAttributes") or [],
        "customRanking": current.get("customRanking") or [],
        "attributesForFaceting": current.get("attributesForFaceting") or [],
        "sortReplicas": [replica.model_dump(by_alias=True) for replica in sort_replicas],
        "indexName": index_name,
    }


@router.put("/{index_name}/settings", summary="Update index settings")
def update_index_settings(
    index_name: str,
    body: UpdateSettingsRequest,
    user: BasicUser = Depends(require_auth),
) -> Dict[str, Any]:
    """Apply searchable/ranking/faceting settings; omitted settings are left unchanged."""
    try:
        with IndexConfigClient(body.app_id, body.write_api_key) as client:
            resp = client.set_settings(index_name, {
                "searchableAttributes": body.searchable_attributes,
                "customRanking": body.custom_ranking,
                "attributesForFaceting": body.attributes_for_faceting,
            })
    except Exception as e:
        logger.error("Failed to update settings", index=index_name, error=str(e))
        raise APIError(str(e) or "Failed to update settings")

    return {
        "message": "Settings updated successfully",
        "taskID": resp.get("taskID"),
    }


# =============================================================================
# Hits
# =============================================================================

@router.get("/{index_name}/hits", summary="Browse index records")
def get_index_hits(
    index_name: str,
    app_id: Optional[str] = Query(None, alias="appId"),
    write_api_key: Optional[str] = Query(None, alias="writeApiKey"),
    user: BasicUser = Depends(require_auth),
) -> Dict[str, Any]:
    """First page of records (empty query, all attributes)."""
    _require_credentials(app_id, write_api_key, "query parameters")
    settings = get_settings()

    try:
        with IndexConfigClient(app_id, write_api_key) as client:
            hits = client.fetch_sample_records(index_name, settings.hits_page_size)
    except Exception as e:
        logger.error("Failed to fetch hits", index=index_name, error=str(e))
        raise APIError(str(e) or "Failed to fetch hits")

    return {
        "hits": hits,
        "indexName": index_name,
    }
