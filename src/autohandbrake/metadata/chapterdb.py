"""Chapter name service client."""

from typing import Optional

import httpx
import structlog

from autohandbrake.errors import ChapterLookupError
from autohandbrake.models.chapter import Chapter, ChapterResult
from autohandbrake.utils.language import normalize_language

logger = structlog.get_logger(__name__)


class ChapterDbClient:
    """Look up chapter names by title and chapter count.

    The service is queried in two stages: a search returning candidate
    references, then one detail request per candidate. No request is
    retried.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        """Initialize chapter service client.

        Args:
            base_url: Service root URL
            api_key: Optional API key sent as the ApiKey header
            timeout: Request timeout in seconds
            client: Pre-built HTTP client (mainly for tests)
        """
        self.base_url = base_url.rstrip("/")
        headers = {"Accept": "application/json"}
        if api_key:
            headers["ApiKey"] = api_key
        self.client = client or httpx.Client(timeout=timeout)
        self.headers = headers

    def close(self):
        """Close HTTP client."""
        self.client.close()

    def __enter__(self) -> "ChapterDbClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _get(self, path: str, params: Optional[dict] = None):
        try:
            response = self.client.get(
                f"{self.base_url}{path}", params=params, headers=self.headers
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Chapter service error",
                url=str(e.request.url),
                status_code=e.response.status_code,
            )
            raise ChapterLookupError(
                f"Chapter service error: {e.response.status_code} for {e.request.url}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error("Chapter service request failed", path=path, error=str(e))
            raise ChapterLookupError(f"Chapter service request failed: {e}") from e
        except ValueError as e:
            logger.error("Chapter service returned invalid JSON", path=path, error=str(e))
            raise ChapterLookupError(f"Invalid chapter service response: {e}") from e

    def search(self, title: str, chapter_count: int) -> list[str]:
        """Search for candidate chapter sets.

        Args:
            title: Title to search for (escaped into the query string)
            chapter_count: Expected number of chapters

        Returns:
            Candidate references
        """
        data = self._get(
            "/chapters/search",
            params={"title": title, "chapterCount": chapter_count},
        )
        if not isinstance(data, list):
            logger.error("Unexpected chapter search response", type=type(data).__name__)
            raise ChapterLookupError(
                f"Unexpected chapter search response: expected a list, got {type(data).__name__}"
            )
        refs = [str(item["id"]) for item in data if isinstance(item, dict) and "id" in item]
        logger.info("Searched chapter service", title=title, chapter_count=chapter_count, candidates=len(refs))
        return refs

    def fetch(self, ref: str) -> ChapterResult:
        """Fetch one chapter set.

        Raises:
            ChapterLookupError: If the request fails or the payload is malformed
        """
        data = self._get(f"/chapters/{ref}")
        try:
            chapters = tuple(
                Chapter(
                    index=position,
                    timestamp=str(entry.get("time") or ""),
                    title=str(entry.get("name") or ""),
                )
                for position, entry in enumerate(data.get("chapters") or [], 1)
            )
            lang = data.get("lang")
            return ChapterResult(
                ref=str(data.get("id") or ref),
                title=str(data.get("title") or ""),
                confirmations=int(data.get("confirmations") or 0),
                chapters=chapters,
                language=normalize_language(lang) if lang else None,
            )
        except (TypeError, ValueError, AttributeError) as e:
            logger.error("Malformed chapter set", ref=ref, error=str(e))
            raise ChapterLookupError(f"Malformed chapter set {ref}: {e}") from e

    def lookup(
        self,
        title: str,
        chapter_count: int,
        best_result: bool = True,
        language: Optional[str] = None,
    ) -> list[ChapterResult]:
        """Find chapter sets matching a title and exact chapter count.

        Args:
            title: Title to search for; an empty title skips the lookup
            chapter_count: Required number of chapters
            best_result: Return only the most confirmed result
            language: Preferred language; applied only when a candidate has it

        Returns:
            Matching results ordered by confirmations, highest first

        Raises:
            ChapterLookupError: On any non-success response or malformed payload
        """
        if not title:
            logger.info("No title, skipping chapter lookup")
            return []

        results = []
        for ref in self.search(title, chapter_count):
            result = self.fetch(ref)
            if len(result) != chapter_count:
                logger.debug(
                    "Discarding chapter set with wrong count",
                    ref=ref,
                    expected=chapter_count,
                    actual=len(result),
                )
                continue
            results.append(result)

        if language:
            language = normalize_language(language)
            preferred = [r for r in results if r.language == language]
            if preferred:
                results = preferred

        results.sort(key=lambda r: r.confirmations, reverse=True)

        logger.info(
            "Chapter lookup complete",
            title=title,
            chapter_count=chapter_count,
            matches=len(results),
        )

        if best_result:
            return results[:1]
        return results
