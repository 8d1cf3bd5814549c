"""
Catalog naming through a multimodal text/vision model.

The service is shown a tight cutout and asked to pick one category label and
invent a short item name. Failures are retried a bounded number of times with
a fixed backoff; when every attempt fails the item gets a clearly marked
placeholder name instead of blocking the pipeline output.

Classes:
    NamingResult: Outcome of a naming request
    NamingServiceError: Raised for a single failed attempt
    NamingService: HTTP client with retry and placeholder fallback
"""

import base64
import json
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import requests

from GC_Libs.constants import (
    MAX_ITEM_NAME_LENGTH,
    NAMING_API_URL,
    NAMING_BACKOFF_SECONDS,
    NAMING_DEFAULT_NAME,
    NAMING_FAILED_NAME,
    NAMING_MODEL,
    NAMING_RETRIES,
    NAMING_TIMEOUT_SECONDS,
)
from GC_Libs.CatalogLib.categories import (
    DEFAULT_CATEGORY,
    category_labels,
    find_category_by_label,
)
from GC_Libs.CatalogLib.filename_builder import generate_full_filename

logger = logging.getLogger(__name__)

JSON_BLOCK_PATTERN = re.compile(r"\{[\s\S]*\}")


@dataclass(frozen=True)
class NamingResult:
    """Outcome of a naming request.

    Attributes:
        category_id: Chosen category id
        item_name: Item name (placeholder when naming failed)
        name: Full catalog filename stem
        succeeded: False when the placeholder was used
    """
    category_id: str
    item_name: str
    name: str
    succeeded: bool = True


class NamingServiceError(RuntimeError):
    pass


def build_prompt() -> str:
    labels = ", ".join(category_labels())
    return (
        f"分析：[{labels}]から1つ選択。具体的でユニークな日本語名を考案。"
        'JSON形式 {"category": "カテゴリ名", "name": "日本語名"} で出力。余計な文字は一切含めない。'
    )


def parse_naming_response(payload: Dict[str, Any]) -> NamingResult:
    """
    Extract category and name from a generateContent response payload.

    Unknown categories fall back to the default category; a missing name
    falls back to the default new-item name.

    Raises:
        NamingServiceError: If the payload holds no usable JSON object
    """
    try:
        raw_text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise NamingServiceError("Response contains no text") from e
    if not raw_text:
        raise NamingServiceError("Response contains no text")

    match = JSON_BLOCK_PATTERN.search(raw_text)
    if not match:
        raise NamingServiceError("JSON not found in response text")

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise NamingServiceError(f"Invalid JSON in response: {e}") from e
    if not isinstance(parsed, dict):
        raise NamingServiceError("Response JSON is not an object")

    category = find_category_by_label(parsed.get("category")) or DEFAULT_CATEGORY
    item_name = str(parsed.get("name") or NAMING_DEFAULT_NAME)[:MAX_ITEM_NAME_LENGTH]
    return NamingResult(
        category_id=category.id,
        item_name=item_name,
        name=generate_full_filename(category.id, item_name),
    )


class NamingService:
    """
    Client for the naming model.

    Example:
        >>> service = NamingService(api_key)
        >>> result = service.suggest_name(tight_png_bytes, fallback_category_id)
        >>> result.name
        '4_2_ドレス_星空のドレス'
    """

    def __init__(
        self,
        api_key: str,
        model: str = NAMING_MODEL,
        retries: int = NAMING_RETRIES,
        backoff: float = NAMING_BACKOFF_SECONDS,
        timeout: float = NAMING_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if retries < 0:
            raise ValueError(f"retries must be >= 0, got {retries}")
        if backoff < 0:
            raise ValueError(f"backoff must be >= 0, got {backoff}")

        self.api_key = str(api_key or "").strip()
        self.model = model
        self.retries = retries
        self.backoff = backoff
        self.timeout = timeout
        self.session = session or requests.Session()
        self._sleep = sleep

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @property
    def url(self) -> str:
        return NAMING_API_URL.format(model=self.model)

    def _build_body(self, png_bytes: bytes) -> Dict[str, Any]:
        return {
            "contents": [
                {
                    "parts": [
                        {"text": build_prompt()},
                        {
                            "inlineData": {
                                "mimeType": "image/png",
                                "data": base64.b64encode(png_bytes).decode("ascii"),
                            }
                        },
                    ]
                }
            ]
        }

    def request_name(self, png_bytes: bytes) -> NamingResult:
        """
        Make a single naming request.

        Raises:
            NamingServiceError: On transport, HTTP or parsing failure
        """
        if not png_bytes:
            raise NamingServiceError("Image payload is empty")

        try:
            response = self.session.post(
                self.url,
                params={"key": self.api_key},
                json=self._build_body(png_bytes),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise NamingServiceError(f"Request failed: {e}") from e

        if not response.ok:
            raise NamingServiceError(f"API error: HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise NamingServiceError(f"Response is not JSON: {e}") from e

        return parse_naming_response(payload)

    def suggest_name(self, png_bytes: bytes, fallback_category_id: str = DEFAULT_CATEGORY.id) -> NamingResult:
        """
        Name an item, retrying on failure.

        Makes one attempt plus up to ``retries`` more, sleeping ``backoff``
        seconds between attempts.

        Args:
            png_bytes: Encoded tight output of the item
            fallback_category_id: Category kept when naming fails

        Returns:
            NamingResult; ``succeeded`` is False when the placeholder was used

        Raises:
            NamingServiceError: If no API key is configured
        """
        if not self.enabled:
            raise NamingServiceError("No API key configured for the naming service")

        attempts = self.retries + 1
        for attempt in range(1, attempts + 1):
            try:
                return self.request_name(png_bytes)
            except NamingServiceError as e:
                logger.debug("Naming attempt %d/%d failed: %s", attempt, attempts, e)
                if attempt < attempts:
                    self._sleep(self.backoff)

        logger.warning("Naming failed after %d attempts; using placeholder name", attempts)
        return NamingResult(
            category_id=fallback_category_id,
            item_name=NAMING_FAILED_NAME,
            name=generate_full_filename(fallback_category_id, NAMING_FAILED_NAME),
            succeeded=False,
        )
