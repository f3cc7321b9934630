"""HTTP implementation of LocationDirectory."""

from __future__ import annotations

from stockflow.domain.exceptions import MalformedResponse
from stockflow.domain.model.location import Location
from stockflow.domain.repository.location_directory import LocationDirectory
from stockflow.infrastructure.http.client import UpstreamClient


class HttpLocationDirectory(LocationDirectory):

    def __init__(self, client: UpstreamClient) -> None:
        self._client = client

    def list_active(self) -> list[Location]:
        payload = self._client.get("/locations")
        if not isinstance(payload, list):
            raise MalformedResponse("Expected a list of locations")
        locations = [self._to_domain(raw) for raw in payload]
        return [location for location in locations if location.active]

    @staticmethod
    def _to_domain(raw: dict) -> Location:
        try:
            return Location(
                id=int(raw["id"]),
                name=str(raw.get("name", "")),
                slug=str(raw.get("slug", "")),
                active=Location.parse_active_flag(raw.get("is_active", 0)),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedResponse(f"Unreadable location entry: {raw!r}") from exc
