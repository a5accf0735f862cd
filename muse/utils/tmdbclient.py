from typing import Any, Dict, Optional

import requests

from muse.utils.config import settings


class TMDBClient:
    BASE_URL = "https://api.themoviedb.org/3"

    def __init__(
        self,
        api_key: Optional[str] = None,
        bearer_token: Optional[str] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key or settings.TMDB_API_KEY
        self.bearer_token = bearer_token or settings.TMDB_API_BEARER
        self.timeout = timeout
        self.session = session or requests.Session()

        if not self.api_key and not self.bearer_token:
            raise RuntimeError(
                "TMDB credentials not configured. Set TMDB_API_KEY (v3) or TMDB_API_BEARER (v4)."
            )

    def _request(self, method: str, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.BASE_URL}{path}"
        params = dict(params or {})
        headers: Dict[str, str] = {}

        if self.bearer_token:
            headers["Authorization"] = f"Bearer {self.bearer_token}"
        elif self.api_key:
            params["api_key"] = self.api_key

        resp = self.session.request(method, url, params=params, headers=headers, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def popular_movies(self, page: int = 1) -> Dict[str, Any]:
        return self._request("GET", "/movie/popular", params={"page": page})

    def top_rated_movies(self, page: int = 1) -> Dict[str, Any]:
        return self._request("GET", "/movie/top_rated", params={"page": page})

    def get_movie_details(self, tmdb_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/movie/{tmdb_id}")


def release_year(details: Dict[str, Any]) -> Optional[int]:
    release_date = details.get("release_date") or ""
    try:
        return int(release_date[:4])
    except ValueError:
        return None


def map_tmdb_to_movie(details: Dict[str, Any]) -> Dict[str, Any]:
    """Column values for a ``Movie`` row built from a TMDB details payload."""
    return {
        "tmdb_id": details.get("id"),
        "title": details.get("title"),
        "original_title": details.get("original_title"),
        "year": release_year(details),
        "runtime": details.get("runtime") or None,
        "synopsis": details.get("overview") or None,
        "poster_path": details.get("poster_path"),
        "vote_average": details.get("vote_average") or 0,
        "vote_count": details.get("vote_count") or 0,
        "original_language": details.get("original_language"),
        "adult": bool(details.get("adult")),
    }
