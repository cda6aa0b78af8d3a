# ============================================================================
# CLAUDE CONTEXT - TWITTER BACKEND
# ============================================================================
# STATUS: Adapter Layer - Social search backend
# PURPOSE: List attributes extracted from one recent-search result set
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: TwitterBackend
# DEPENDENCIES: services.twitter_client, .base
# ============================================================================
"""
Twitter Backend.

The selector is the search term. One search is issued per request and all
list attributes are extracted from the same result set, in the order the
upstream returned the results. Scalar attributes are not supported.

Field resolution per result item:
    - the attribute's source_field when the item carries it
    - the tweet `text` when the mapping gave no alias (e.g. "tweets:array")
    - otherwise SourceFieldNotFound
"""

from typing import Any, List, Optional

from ngsi_proxy.errors import InvalidSelector, SourceFieldNotFound, UnsupportedShape, UpstreamError
from ngsi_proxy.mapping import AttributeSpec, MappingSpec
from services.twitter_client import TwitterClient
from .base import BackendAdapter

DEFAULT_ITEM_FIELD = "text"


class TwitterBackend(BackendAdapter):
    """Backend sourcing list attributes from tweet search results."""

    name = "twitter"

    def __init__(self, client: TwitterClient, max_workers: int = 1):
        super().__init__(max_workers=max_workers)
        self.client = client

    def validate(self, specs: MappingSpec, selector: Optional[str]) -> None:
        scalars = [spec.ngsi_name for spec in specs if not spec.is_list]
        if scalars:
            raise UnsupportedShape(
                f"Twitter backend only serves list attributes; scalar requested for: {', '.join(scalars)}"
            )
        if not selector or not selector.strip():
            raise InvalidSelector("Twitter backend requires a search term")

    def prepare(self, selector: Optional[str]) -> List[dict]:
        response = self.client.search_recent(selector.strip())

        if not response.success:
            self.logger.warning(
                f"Twitter search failed: {response.error}",
                extra={'custom_dimensions': {'query': selector, 'status_code': response.status_code}}
            )
            raise UpstreamError(response.error, cause=response.exception, backend=self.name)

        data = response.data
        if not isinstance(data, dict):
            raise UpstreamError("Twitter returned a malformed payload", backend=self.name)

        items = data.get("data", [])
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            raise UpstreamError("Twitter returned a malformed result list", backend=self.name)

        self.logger.info(
            f"Twitter search returned {len(items)} results",
            extra={'custom_dimensions': {'query': selector, 'result_count': len(items)}}
        )
        return items

    def extract_value(self, spec: AttributeSpec, payload: Any, selector: Optional[str]) -> List[Any]:
        aliased = spec.source_field != spec.ngsi_name
        values = []
        for item in payload:
            if spec.source_field in item:
                values.append(item[spec.source_field])
            elif not aliased and DEFAULT_ITEM_FIELD in item:
                values.append(item[DEFAULT_ITEM_FIELD])
            else:
                raise SourceFieldNotFound(
                    f"Search results do not carry field '{spec.source_field}'"
                )
        return values

    def close(self) -> None:
        self.client.close()

    def describe(self) -> dict:
        return {**super().describe(), "configured": self.client.is_configured}
