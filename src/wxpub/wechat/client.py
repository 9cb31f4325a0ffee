"""Official account API client: access token, image hosting, drafts, publishing"""

import logging
from typing import Any, Optional

from pydantic import BaseModel

from wxpub.errors import AuthError, PlatformApiError
from wxpub.wechat.transport import Transport


logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.weixin.qq.com"


class DraftArticle(BaseModel):
    """One article of a draft/add request; unset optional fields are omitted."""
    title: str
    content: str
    thumb_media_id: str
    author: Optional[str] = None
    digest: Optional[str] = None
    content_source_url: Optional[str] = None


def check_response(endpoint: str, data: dict[str, Any]) -> dict[str, Any]:
    """Raise PlatformApiError when a response carries a non-zero errcode."""
    code = data.get("errcode")
    if code:
        raise PlatformApiError(endpoint, code, data.get("errmsg", ""))
    return data


def _require(endpoint: str, data: dict[str, Any], key: str) -> Any:
    value = data.get(key)
    if not value:
        raise PlatformApiError(endpoint, None, f"empty {key}")
    return value


class WeChatClient:
    """Thin wrapper over the platform endpoints; one access token per client."""

    def __init__(
        self,
        app_id: str,
        app_secret: str,
        transport: Optional[Transport] = None,
        api_base: str = DEFAULT_API_BASE,
        ):
        self.app_id = app_id
        self.app_secret = app_secret
        self.transport = transport or Transport()
        self.api_base = api_base.rstrip("/")
        self._token: Optional[str] = None

    def _url(self, path: str) -> str:
        return f"{self.api_base}/cgi-bin/{path}"

    def get_token(self) -> str:
        """Fetch (once) and return the access token."""
        if self._token:
            return self._token
        if not self.app_id or not self.app_secret:
            raise AuthError(None, "missing app_id/app_secret (set WXPUB_APP_ID and WXPUB_APP_SECRET)")
        data = self.transport.request_json("GET", self._url("token"), params={
            "grant_type": "client_credential",
            "appid": self.app_id,
            "secret": self.app_secret,
        })
        if data.get("errcode"):
            raise AuthError(data["errcode"], data.get("errmsg", ""))
        if not data.get("access_token"):
            raise AuthError(None, "empty access_token")
        self._token = data["access_token"]
        logger.debug("access token acquired (expires_in=%s)", data.get("expires_in"))
        return self._token

    def _post_json(self, endpoint: str, body: dict) -> dict[str, Any]:
        data = self.transport.request_json(
            "POST", self._url(endpoint), body, params={"access_token": self.get_token()},
        )
        return check_response(endpoint, data)

    def upload_image(self, filename: str, data: bytes) -> dict[str, Any]:
        """Host a body image; the response carries its url."""
        endpoint = "media/uploadimg"
        resp = self.transport.request_multipart(
            self._url(endpoint), "media", filename, data, params={"access_token": self.get_token()},
        )
        return check_response(endpoint, resp)

    def upload_thumb(self, filename: str, data: bytes) -> dict[str, Any]:
        """Register a cover image as permanent material; the response carries media_id."""
        endpoint = "material/add_material"
        resp = self.transport.request_multipart(
            self._url(endpoint), "media", filename, data,
            params={"access_token": self.get_token(), "type": "image"},
        )
        check_response(endpoint, resp)
        _require(endpoint, resp, "media_id")
        return resp

    def add_draft(self, article: DraftArticle) -> str:
        """Create a single-article draft and return its media_id."""
        endpoint = "draft/add"
        resp = self._post_json(endpoint, {"articles": [article.model_dump(exclude_none=True)]})
        return _require(endpoint, resp, "media_id")

    def submit_publish(self, media_id: str) -> str:
        """Submit a draft for publication and return the publish_id."""
        endpoint = "freepublish/submit"
        resp = self._post_json(endpoint, {"media_id": media_id})
        return _require(endpoint, resp, "publish_id")

    def publish_status(self, publish_id: str) -> dict[str, Any]:
        return self._post_json("freepublish/get", {"publish_id": publish_id})
