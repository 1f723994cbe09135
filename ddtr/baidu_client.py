"""Async client for the Baidu general text translation API."""
from __future__ import annotations

import hashlib
import logging
import random
from typing import Callable, List, Optional

import httpx

from ddtr.errors import BaiduApiError
from ddtr.languages import LanguageCode

logger = logging.getLogger(__name__)

BAIDU_TRANSLATE_ENDPOINT = "https://fanyi-api.baidu.com/api/trans/vip/translate"
DEFAULT_TIMEOUT_SECONDS = 10.0


def build_sign(app_id: str, text: str, salt: str, app_key: str) -> str:
    """Request signature expected by the service: md5(appid + q + salt + key), lowercase hex."""
    return hashlib.md5(f"{app_id}{text}{salt}{app_key}".encode("utf-8")).hexdigest()


class BaiduTranslateClient:
    """
    Thin wrapper around the Baidu translation endpoint.

    The client holds credentials only. Every call opens its own HTTP client
    from ``client_factory``.
    """

    def __init__(
        self,
        app_id: str,
        app_key: str,
        *,
        endpoint: str = BAIDU_TRANSLATE_ENDPOINT,
        client_factory: Optional[Callable[[], httpx.AsyncClient]] = None,
    ):
        self._app_id = app_id
        self._app_key = app_key
        self._endpoint = endpoint
        self._client_factory = client_factory or (
            lambda: httpx.AsyncClient(timeout=httpx.Timeout(DEFAULT_TIMEOUT_SECONDS))
        )

    def _build_payload(self, text: str, from_language: LanguageCode, to_language: LanguageCode) -> dict:
        salt = str(random.randint(32768, 65536))
        return {
            "q": text,
            "from": from_language.api_code,
            "to": to_language.api_code,
            "appid": self._app_id,
            "salt": salt,
            "sign": build_sign(self._app_id, text, salt, self._app_key),
        }

    async def translate(
        self,
        text: str,
        from_language: LanguageCode,
        to_language: LanguageCode,
    ) -> List[str]:
        """
        Translate ``text`` and return every translated variant in response order.

        An empty list means the service answered without an error but also
        without any translation; deciding what that means is up to the caller.

        Raises:
            BaiduApiError: On transport failures, non-2xx responses, or an
                ``error_code`` in the response body.
        """
        payload = self._build_payload(text, from_language, to_language)
        logger.debug("Requesting translation %s -> %s", from_language.api_code, to_language.api_code)

        try:
            async with self._client_factory() as client:
                response = await client.post(self._endpoint, data=payload)
        except httpx.HTTPError as exc:
            raise BaiduApiError(f"Request to translation service failed: {exc}") from exc

        if response.status_code < 200 or response.status_code >= 300:
            raise BaiduApiError(
                f"Translation service responded with HTTP {response.status_code}",
                code=str(response.status_code),
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise BaiduApiError("Translation service returned a non-JSON response") from exc

        return self._extract_translations(body)

    @staticmethod
    def _extract_translations(body) -> List[str]:
        if not isinstance(body, dict):
            raise BaiduApiError("Translation service returned an unexpected payload")

        error_code = body.get("error_code")
        # "52000" is the documented success code and may appear alongside results.
        if error_code and str(error_code) != "52000":
            raise BaiduApiError(body.get("error_msg") or "Unknown error", code=str(error_code))

        results = body.get("trans_result") or []
        return [item["dst"] for item in results if isinstance(item, dict) and "dst" in item]
