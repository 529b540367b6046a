"""
Algolia index client for reading and writing index configuration.

Uses algoliasearch v4 (SearchClientSync):
- get_settings(index_name)
- set_settings(index_name, index_settings={...}, forward_to_replicas=...)
- search_single_index(index_name, search_params={...})
- save_objects(index_name, objects=[...])
- get_task(index_name, task_id) / wait_for_task(index_name, task_id)

Responses are pydantic models; use .to_dict() for plain dicts.
Unlike a long-lived service client, one IndexConfigClient is built per
request or CLI run from the credentials the caller supplies.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from algoliasearch.search.client import SearchClientSync

from config.settings import get_settings
from core.logging import get_logger

logger = get_logger(__name__)

# Per-hit metadata Algolia adds to search results; not part of the record
_HIT_METADATA_KEYS = ("_highlightResult", "_snippetResult", "_rankingInfo", "_distinctSeqID")


class AlgoliaDataError(RuntimeError):
    """Raised when index settings or records cannot be fetched."""


@dataclass
class IndexSnapshot:
    """Current settings of an index plus a sample of its records."""
    index_name: str
    settings: Dict[str, Any]
    records: List[Dict[str, Any]]
    sortable_attributes: List[str] = field(default_factory=list)

    def current(self, setting: str) -> List[str]:
        """Current value of a list setting ("sortableAttributes" is derived from replicas)."""
        if setting == "sortableAttributes":
            return list(self.sortable_attributes)
        return list(self.settings.get(setting) or [])


def strip_hit_metadata(hit: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in hit.items() if key not in _HIT_METADATA_KEYS}


class IndexConfigClient:
    """
    Thin wrapper around SearchClientSync for configuration work.

    Handles settings reads/writes, sample record fetches, record uploads
    and task status checks.
    """

    def __init__(
        self,
        app_id: Optional[str] = None,
        api_key: Optional[str] = None,
        client: Optional[SearchClientSync] = None,
    ):
        settings = get_settings()
        self.app_id = app_id or settings.algolia_app_id

        if not self.app_id:
            raise ValueError("ALGOLIA_APP_ID is required")

        api_key = api_key or settings.algolia_write_key
        if not api_key:
            raise ValueError("ALGOLIA_WRITE_KEY is required")

        self._client = client or SearchClientSync(self.app_id, api_key)

    def close(self):
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> "IndexConfigClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # =========================================================================
    # Settings
    # =========================================================================

    def get_settings(self, index_name: str) -> Dict[str, Any]:
        """Get current index settings."""
        resp = self._client.get_settings(index_name=index_name)
        return resp.to_dict()

    def set_settings(
        self,
        index_name: str,
        index_settings: Dict[str, Any],
        forward_to_replicas: bool = False,
    ) -> Dict[str, Any]:
        """
        Apply (partial) settings to an index.

        Keys whose value is None are left out so they don't reset the setting.

        Returns:
            Response dict with taskID.
        """
        payload = {key: value for key, value in index_settings.items() if value is not None}
        resp = self._client.set_settings(
            index_name=index_name,
            index_settings=payload,
            forward_to_replicas=forward_to_replicas,
        )
        logger.info("Updated index settings", index=index_name, settings=sorted(payload))
        return resp.to_dict()

    # =========================================================================
    # Records
    # =========================================================================

    def fetch_sample_records(self, index_name: str, limit: int) -> List[Dict[str, Any]]:
        """Fetch up to `limit` records with an empty query, all attributes retrieved."""
        resp = self._client.search_single_index(
            index_name=index_name,
            search_params={
                "query": "",
                "hitsPerPage": limit,
                "attributesToRetrieve": ["*"],
            },
        )
        return [strip_hit_metadata(hit) for hit in resp.to_dict().get("hits", [])]

    def save_records(self, index_name: str, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Save (upsert) records and wait for the batch tasks to complete.

        Returns:
            List of batch response dicts (each with taskID).
        """
        responses = self._client.save_objects(
            index_name=index_name,
            objects=records,
            wait_for_tasks=True,
        )
        batches = [resp.to_dict() for resp in responses]
        logger.info("Saved records", index=index_name, records=len(records), batches=len(batches))
        return batches

    # =========================================================================
    # Tasks
    # =========================================================================

    def get_task_status(self, index_name: str, task_id: int) -> str:
        """Status of an indexing task: "published" or "notPublished"."""
        resp = self._client.get_task(index_name=index_name, task_id=task_id)
        status = resp.to_dict().get("status")
        return getattr(status, "value", status)

    def wait_for_task(self, index_name: str, task_id: int):
        """Wait for an indexing task to complete."""
        self._client.wait_for_task(index_name=index_name, task_id=task_id)

    # =========================================================================
    # Snapshots
    # =========================================================================

    def get_sortable_attributes_from_replicas(self, settings: Dict[str, Any]) -> List[str]:
        """
        Infer the sort criteria already exposed through replicas.

        A replica counts when its ranking differs from the primary's and its
        first criterion is asc(...) or desc(...). Replicas whose settings
        can't be read are skipped.
        """
        replicas = settings.get("replicas") or []
        if not replicas:
            logger.info("No replicas found")
            return []

        logger.info("Checking replica rankings", replicas=len(replicas))
        primary_ranking = settings.get("ranking") or []
        sortable: List[str] = []

        for replica_name in replicas:
            # Virtual replicas are listed as virtual(name)
            name = replica_name[len("virtual("):-1] if replica_name.startswith("virtual(") else replica_name
            try:
                replica_ranking = self.get_settings(name).get("ranking") or []
            except Exception as e:
                logger.warning("Could not fetch settings for replica", replica=name, error=str(e))
                continue

            if not replica_ranking or replica_ranking == primary_ranking:
                continue

            first = replica_ranking[0]
            if first.startswith("asc(") or first.startswith("desc("):
                sortable.append(first)

        return sortable

    def fetch_index_data(self, index_name: str, limit: int) -> IndexSnapshot:
        """
        Fetch settings, sample records and replica sort criteria for an index.

        Raises:
            AlgoliaDataError: If settings or records cannot be fetched.
        """
        try:
            logger.info("Fetching index settings", index=index_name)
            settings = self.get_settings(index_name)

            logger.info("Fetching sample records", index=index_name, limit=limit)
            records = self.fetch_sample_records(index_name, limit)

            sortable = self.get_sortable_attributes_from_replicas(settings)
        except Exception as e:
            raise AlgoliaDataError(f"Failed to fetch data from Algolia: {e}") from e

        return IndexSnapshot(
            index_name=index_name,
            settings=settings,
            records=records,
            sortable_attributes=sortable,
        )
