"""Best-effort fetch of externally hosted token lists.

Any failure degrades to an empty list; GET /tokens has no other source.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

logger = structlog.get_logger()


class TokenCatalog:
    """Reads token-list documents and keeps tokens of one chain.

    Args:
        http_client: Shared ``httpx.AsyncClient``
        list_urls: Token-list documents (``{"tokens": [...]}``), read in order
        chain_id: Chain to keep
    """

    def __init__(
        self, http_client: httpx.AsyncClient, list_urls: tuple[str, ...], chain_id: int
    ) -> None:
        self.http_client = http_client
        self.list_urls = list_urls
        self.chain_id = chain_id

    async def list_tokens(self) -> list[dict[str, Any]]:
        """Return the catalog tokens for ``chain_id``, or [] on any failure."""
        tokens: list[dict[str, Any]] = []
        try:
            for url in self.list_urls:
                response = await self.http_client.get(url)
                response.raise_for_status()
                token_list = response.json()
                tokens.extend(
                    token
                    for token in token_list["tokens"]
                    if isinstance(token, dict) and token.get("chainId") == self.chain_id
                )
        except (httpx.HTTPError, httpx.InvalidURL, ValueError, KeyError, TypeError) as e:
            logger.warning("token_catalog_unavailable", error=str(e), urls=list(self.list_urls))
            return []

        logger.debug("token_catalog_fetched", count=len(tokens))
        return tokens
