"""
This module defines the RenowebClient for the Renoweb legacy JSON service.

Every Renoweb method is called with a JSON POST body. The response wraps the
actual payload as a JSON string in the ``d`` member, so it is decoded twice.
"""
import json
import logging
import threading
from typing import Any, Dict, List, Optional

import requests

from ..config import RENOWEB_BASE_URL, REQUEST_TIMEOUT
from ..exceptions import UpstreamCommunicationError, UpstreamProtocolError
from ..models import Material

# Get a logger instance for this module
logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json; charset=utf-8"}


class RenowebClient:
    """Handles requests to the Renoweb address, material and calendar methods."""

    def __init__(
        self,
        base_url: str = RENOWEB_BASE_URL,
        timeout: int = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        self._shared_session = session
        if session is not None:
            session.headers.update(JSON_HEADERS)
        self._local = threading.local()

    @property
    def session(self) -> requests.Session:
        """
        Returns the injected session, or one session per thread otherwise.

        requests.Session is not guaranteed to be thread-safe and the Flask
        server handles each request on its own thread.
        """
        if self._shared_session is not None:
            return self._shared_session
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update(JSON_HEADERS)
            self._local.session = session
        return session

    def call(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Calls a Renoweb method and returns the decoded inner payload.

        Raises:
            UpstreamCommunicationError: On network errors or HTTP error status.
            UpstreamProtocolError: If the response is not the expected JSON.
        """
        url = self.base_url + method
        try:
            response = self.session.post(
                url, data=json.dumps(payload), timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"Renoweb request {method} failed: {e}")
            raise UpstreamCommunicationError(str(e)) from e

        try:
            outer = response.json()
            inner = json.loads(outer["d"])
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Could not decode Renoweb response for {method}: {e}")
            raise UpstreamProtocolError(f"Unexpected response from {method}: {e}") from e

        if not isinstance(inner, dict):
            raise UpstreamProtocolError(
                f"Unexpected response from {method}: expected an object, "
                f"got {type(inner).__name__}"
            )
        logger.info(f"Renoweb call {method} succeeded.")
        return inner

    def _list(self, method: str, payload: Dict[str, Any]) -> List[Any]:
        data = self.call(method, payload)
        items = data.get("list")
        if not isinstance(items, list):
            raise UpstreamProtocolError(f"Response from {method} has no 'list' member")
        return items

    def search_addresses(self, address_text: str) -> List[Dict[str, Any]]:
        """Returns the address matches Renoweb finds for a free-text search."""
        return self._list(
            "Adresse_SearchByString",
            {"searchterm": address_text, "addresswithmateriel": 3},
        )

    def get_materials(self, address_id: int) -> List[Dict[str, Any]]:
        """Returns the raw material list registered for an address."""
        return self._list(
            "GetAffaldsplanMateriel_mitAffald",
            {"adrid": address_id, "common": False},
        )

    def get_calendar_dates(self, material_id: int) -> List[str]:
        """Returns the free-text pickup dates of one material."""
        return self._list("GetCalender_mitAffald", {"materialid": material_id})

    def get_material_list(self, address_id: int) -> List[Material]:
        """Returns the materials for an address as Material objects."""
        materials = []
        for item in self.get_materials(address_id):
            try:
                materials.append(Material(material_id=item["id"], name=item["materielnavn"]))
            except (KeyError, TypeError) as e:
                raise UpstreamProtocolError(f"Malformed material entry {item!r}") from e
        return materials
