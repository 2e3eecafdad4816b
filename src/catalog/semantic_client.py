"""
Client for the remote semantic ranking service.

The service takes {"query", "n_results"} and answers with ranked items,
each carrying at least a product identifier. Every failure mode
(transport error, timeout, non-2xx, unusable payload) comes back as a
failed SemanticSearchResult instead of an exception, so the catalog can
fall back to substring search with a plain branch.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import requests

from config.settings import Settings, get_settings
from core.logging import get_logger

logger = get_logger(__name__)

_ID_KEYS = ("id", "product_id", "productId")
_SCORE_KEYS = ("score", "relevance_score", "similarity", "distance")


@dataclass(frozen=True)
class SemanticCandidate:
    """One ranked item. `score` is opaque and only passed through."""
    product_id: str
    score: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SemanticSearchResult:
    """Outcome of one ranking call: either candidates or a failure reason."""
    ok: bool
    candidates: Tuple[SemanticCandidate, ...] = ()
    error: Optional[str] = None

    @classmethod
    def success(cls, candidates: List[SemanticCandidate]) -> "SemanticSearchResult":
        return cls(ok=True, candidates=tuple(candidates))

    @classmethod
    def failure(cls, error: str) -> "SemanticSearchResult":
        return cls(ok=False, error=error)

    @property
    def product_ids(self) -> List[str]:
        return [c.product_id for c in self.candidates]

    @property
    def is_empty(self) -> bool:
        return not self.candidates


class MalformedResponseError(ValueError):
    """Raised internally when a ranking payload has no usable items."""


def _extract_items(payload: Any) -> List[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("results", "products", "items"):
            items = payload.get(key)
            if isinstance(items, list):
                return items
    raise MalformedResponseError("response has no result list")


def _item_id(item: Dict[str, Any]) -> Optional[str]:
    for key in _ID_KEYS:
        value = item.get(key)
        if value not in (None, ""):
            return str(value)
    metadata = item.get("metadata")
    if isinstance(metadata, dict):
        return _item_id({k: v for k, v in metadata.items() if k != "metadata"})
    return None


def _item_score(item: Dict[str, Any]) -> Optional[float]:
    for key in _SCORE_KEYS:
        value = item.get(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    return None


def parse_candidates(payload: Any, limit: int) -> List[SemanticCandidate]:
    """
    Turn a ranking payload into ordered candidates.

    Accepts a bare list or an object with results/products/items. Items
    without an identifier are skipped and repeated ids keep their first
    (best) rank.

    Raises:
        MalformedResponseError: If the payload has items but none is usable
    """
    items = _extract_items(payload)
    candidates: List[SemanticCandidate] = []
    seen = set()

    for item in items:
        if not isinstance(item, dict):
            continue
        product_id = _item_id(item)
        if product_id is None or product_id in seen:
            continue
        seen.add(product_id)
        candidates.append(SemanticCandidate(
            product_id=product_id,
            score=_item_score(item),
            metadata=item,
        ))
        if len(candidates) >= limit:
            break

    if items and not candidates:
        raise MalformedResponseError("no ranked item carries a product id")
    return candidates


class SemanticSearchClient:
    """
    Synchronous ranking-service client. One attempt per call, no retries.

    Usage:
        client = SemanticSearchClient.from_settings()
        result = client.search("wireless headphones", n_results=100)
        if result.ok and not result.is_empty:
            ranked_ids = result.product_ids
    """

    def __init__(self, url: str, api_key: str = "", timeout_seconds: float = 5.0):
        self.url = url
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "SemanticSearchClient":
        settings = settings or get_settings()
        return cls(
            url=settings.semantic_search_url,
            api_key=settings.semantic_search_api_key,
            timeout_seconds=settings.semantic_search_timeout_seconds,
        )

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def search(self, query: str, n_results: int = 100) -> SemanticSearchResult:
        """Rank products for a natural-language query."""
        if not self.url:
            return SemanticSearchResult.failure("semantic search is not configured")

        try:
            resp = requests.post(
                self.url,
                json={"query": query, "n_results": n_results},
                headers=self._headers(),
                timeout=self.timeout_seconds,
            )
        except requests.Timeout:
            return self._fail(query, f"timed out after {self.timeout_seconds}s")
        except requests.RequestException as e:
            return self._fail(query, f"transport error: {e}")

        if resp.status_code >= 400:
            return self._fail(query, f"ranking service returned {resp.status_code}")

        try:
            candidates = parse_candidates(resp.json(), limit=n_results)
        except (ValueError, MalformedResponseError) as e:
            return self._fail(query, f"malformed response: {e}")

        logger.info("Semantic search ranked", query=query, candidates=len(candidates))
        return SemanticSearchResult.success(candidates)

    def _fail(self, query: str, reason: str) -> SemanticSearchResult:
        logger.warning("Semantic search unavailable", query=query, reason=reason)
        return SemanticSearchResult.failure(reason)
