from __future__ import annotations

from dataclasses import dataclass
from typing import Any

DEFAULT_INDEX_NAME = "snippets"
DEFAULT_LIMIT = 10


@dataclass(slots=True)
class SearchConfig:
    """Connection information for OpenSearch."""

    url: str | None = None
    username: str | None = None
    password: str | None = None
    verify_certs: bool = True
    timeout: int | None = None
    index_name: str = DEFAULT_INDEX_NAME
    default_limit: int = DEFAULT_LIMIT
    strict_ids: bool = False

    def client_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"verify_certs": self.verify_certs}
        if self.url:
            kwargs["hosts"] = [self.url]
        if self.username and self.password:
            kwargs["http_auth"] = (self.username, self.password)
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        return kwargs


__all__ = ["DEFAULT_INDEX_NAME", "DEFAULT_LIMIT", "SearchConfig"]
