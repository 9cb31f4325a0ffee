"""HTTP transport for the platform API"""

import json
import logging
from typing import Any, Optional

import requests

from wxpub.errors import TransportError


logger = logging.getLogger(__name__)


class Transport:
    """JSON and multipart requests over a requests.Session; non-2xx raises TransportError."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = 30.0):
        self.session = session or requests.Session()
        self.timeout = timeout

    @staticmethod
    def _decode(url: str, resp) -> dict[str, Any]:
        text = resp.text
        if not resp.ok:
            raise TransportError(url, resp.status_code, text)
        if not text:
            return {}
        try:
            return json.loads(text)
        except ValueError as e:
            raise TransportError(url, resp.status_code, f"invalid json: {text}") from e

    def request_json(
        self,
        method: str,
        url: str,
        body: Optional[dict] = None,
        params: Optional[dict] = None,
        ) -> dict[str, Any]:
        # The platform shows \uXXXX escapes literally, so keep non-ASCII text as UTF-8.
        data = json.dumps(body, ensure_ascii=False).encode("utf-8") if body is not None else None
        headers = {"Content-Type": "application/json"} if body is not None else None
        logger.debug("%s %s", method, url)
        try:
            resp = self.session.request(
                method, url, params=params, data=data, headers=headers, timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(url, None, str(e)) from e
        return self._decode(url, resp)

    def request_multipart(
        self,
        url: str,
        field_name: str,
        filename: str,
        data: bytes,
        params: Optional[dict] = None,
        ) -> dict[str, Any]:
        logger.debug("POST %s (%s=%s, %d bytes)", url, field_name, filename, len(data))
        try:
            resp = self.session.post(
                url, params=params, files={field_name: (filename, data)}, timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(url, None, str(e)) from e
        return self._decode(url, resp)
