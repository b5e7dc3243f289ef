import requests
from typing import Any, Dict, Optional
from tzscraps.config import Config


class SupabaseClient:
    """Thin REST client for the hosted backend (PostgREST under /rest/v1)."""

    REST_PATH = "rest/v1"

    def __init__(
        self,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        self.url = url or Config.SUPABASE_URL
        self.api_key = api_key or Config.SUPABASE_KEY
        self.timeout = timeout or Config.REQUEST_TIMEOUT

        if not self.url or not self.api_key:
            raise ValueError(
                "SUPABASE_URL and SUPABASE_KEY must be provided in the environment or .env file."
            )

    @property
    def base_url(self) -> str:
        return f"{self.url.rstrip('/')}/{self.REST_PATH}"

    def get_headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _request(self, method: str, endpoint: str, **kwargs) -> Any:
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        headers = self.get_headers()

        if "headers" in kwargs:
            headers.update(kwargs.pop("headers"))

        kwargs.setdefault("timeout", self.timeout)
        response = requests.request(method, url, headers=headers, **kwargs)
        response.raise_for_status()

        # DELETE/PATCH without "Prefer: return=representation" answer 204
        if response.status_code == 204 or not response.content:
            return []

        return response.json()

    def get(self, endpoint: str, **kwargs) -> Any:
        return self._request("GET", endpoint, **kwargs)

    def post(self, endpoint: str, **kwargs) -> Any:
        return self._request("POST", endpoint, **kwargs)

    def patch(self, endpoint: str, **kwargs) -> Any:
        return self._request("PATCH", endpoint, **kwargs)

    def delete(self, endpoint: str, **kwargs) -> Any:
        return self._request("DELETE", endpoint, **kwargs)
