"""
This module defines the CalendarPipeline, the central entry point that turns a
calendar request into a cached iCalendar artifact.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Mapping, Optional

from .cache_key import cache_key_for
from .config import CACHE_TTL, ICS_FILENAME, NO_PICKUPS_SENTINEL
from .exceptions import ArtifactNotFoundError, ClientInputError
from .models import CalendarArtifact, RenderedCalendar
from .services.artifact_cache import ArtifactCache
from .services.calendar_service import CalendarService
from .services.date_normalizer import normalize_dates
from .services.renoweb_client import RenowebClient

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("ics", "text")
DEFAULT_FORMAT = "ics"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CalendarPipeline:
    """
    Orchestrates the cache lookup, upstream fetch, date normalization and
    calendar assembly for calendar requests.

    The pipeline holds no request state: the cache key and artifact timestamp
    of a request are passed along as return values.
    """

    def __init__(
        self,
        client: RenowebClient,
        cache: ArtifactCache,
        calendar_service: CalendarService,
        ttl: timedelta = CACHE_TTL,
        sentinel: str = NO_PICKUPS_SENTINEL,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.client = client
        self.cache = cache
        self.calendar_service = calendar_service
        self.ttl = ttl
        self.sentinel = sentinel
        self.clock = clock

    # --- Upstream lookups ---

    def search_addresses(self, address_text: Optional[str]) -> List[dict]:
        """Searches Renoweb for addresses matching the given text."""
        if not address_text:
            raise ClientInputError("Missing address search text")
        return self.client.search_addresses(address_text)

    def get_materials(self, address_id: Optional[str]) -> List[dict]:
        """Returns the raw material list for an address."""
        return self.client.get_materials(self.parse_address_id(address_id))

    def fetch_schedules(self, address_id: int) -> Dict[str, list]:
        """
        Fetches the pickup dates of every material registered for an address.

        Materials without any scheduled pickup are left out.

        Raises:
            UpstreamCommunicationError: If Renoweb cannot be reached.
            UpstreamProtocolError: If Renoweb returns unparseable data.
        """
        schedules = {}
        for material in self.client.get_material_list(address_id):
            raw_dates = self.client.get_calendar_dates(material.material_id)
            dates = normalize_dates(raw_dates, self.sentinel)
            if not dates:
                logger.info(f"No pickups scheduled for '{material.name}' at address {address_id}.")
                continue
            schedules[material.name] = dates
        return schedules

    # --- Calendar requests ---

    @staticmethod
    def parse_address_id(address_id: Optional[str]) -> int:
        if address_id is None or str(address_id).strip() == "":
            raise ClientInputError("Missing addressId")
        try:
            return int(str(address_id).strip())
        except ValueError as e:
            raise ClientInputError(f"Invalid addressId: {address_id}") from e

    @staticmethod
    def parse_format(query: Mapping[str, str]) -> str:
        fmt = query.get("format", DEFAULT_FORMAT)
        if fmt not in SUPPORTED_FORMATS:
            raise ClientInputError("Invalid format")
        return fmt

    def regenerate(self, key: str, address_id: int) -> CalendarArtifact:
        """Builds a new calendar for the address and stores it under ``key``."""
        logger.info(f"Regenerating calendar {key} for address {address_id}.")
        schedules = self.fetch_schedules(address_id)
        data = self.calendar_service.assemble(schedules)
        self.cache.write(key, data)
        return self.cache.load(key)

    def get_calendar(self, query: Mapping[str, str]) -> CalendarArtifact:
        """
        Returns the calendar artifact for a request, regenerating it when the
        cached copy is missing or older than the ttl.

        Args:
            query: The request query. Must contain ``addressId``.

        Returns:
            The stored CalendarArtifact.

        Raises:
            ClientInputError: If ``addressId`` is missing or not a number.
            UpstreamCommunicationError, UpstreamProtocolError: If
                regeneration fails. A previously stored artifact is left as is.
        """
        address_id = self.parse_address_id(query.get("addressId"))
        key = cache_key_for(query)

        if self.cache.is_fresh(key, now=self.clock(), ttl=self.ttl):
            try:
                artifact = self.cache.load(key)
            except ArtifactNotFoundError:
                logger.warning(f"Cached calendar {key} disappeared, regenerating.")
            else:
                logger.info(f"Serving cached calendar {key} for address {address_id}.")
                return artifact
        return self.regenerate(key, address_id)

    def render(self, artifact: CalendarArtifact, fmt: str = DEFAULT_FORMAT) -> RenderedCalendar:
        """Serializes a stored artifact as an ICS attachment or as plain text."""
        if fmt == "ics":
            return RenderedCalendar(
                body=artifact.data,
                mimetype="text/calendar",
                last_modified=artifact.created_at,
                filename=ICS_FILENAME,
            )
        if fmt == "text":
            return RenderedCalendar(
                body=artifact.data,
                mimetype="text/plain",
                last_modified=artifact.created_at,
            )
        raise ClientInputError("Invalid format")

    def calendar_response(self, query: Mapping[str, str]) -> RenderedCalendar:
        """Validates the query, resolves the artifact and serializes it."""
        if not query.get("addressId"):
            raise ClientInputError("Missing addressId")
        fmt = self.parse_format(query)
        return self.render(self.get_calendar(query), fmt)
