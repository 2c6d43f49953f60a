"""Client for the Sure Petcare cloud API."""
import asyncio
import logging
from urllib.parse import urlsplit
import uuid

import aiohttp
import async_timeout
from cachetools import TTLCache
from homeassistant.util import dt as dt_util

from .const import (
    API_BASE_URL,
    API_LOGIN,
    API_PET_LOCATIONS,
    API_PET_POSITION,
    API_TOPOLOGY,
    API_USER_AGENT,
    REFRESH_CACHE_SECONDS,
    REQUEST_TIMEOUT_SECONDS,
)
from .exceptions import (
    SurePetcareApiError,
    SurePetcareAuthError,
    SurePetcareConnectionError,
    SurePetcareInvalidUrlError,
)
from .models import PetLocation, PetLocationId, SurePetcareTopology

_LOGGER = logging.getLogger(__name__)

_TOPOLOGY = "topology"


class SurePetcareApiClient:
    """Logs in with a bearer token and polls the account topology."""

    def __init__(self, session, username, password, base_url=API_BASE_URL, device_id=None):
        self._session = session
        self._username = username
        self._password = password
        self._base_url = base_url.rstrip("/")
        self._device_id = device_id or str(uuid.uuid4().int)[:10]
        self._token = None
        self._lock = asyncio.Lock()
        self._refresh_cache = TTLCache(maxsize=1, ttl=REFRESH_CACHE_SECONDS)
        self.topology = SurePetcareTopology()
        self.online = False

    @property
    def username(self):
        return self._username

    @property
    def token(self):
        return self._token

    def _build_url(self, path):
        parts = urlsplit(self._base_url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise SurePetcareInvalidUrlError(f"Invalid URL for API call: {self._base_url}")
        return self._base_url + path

    def _headers(self):
        headers = {
            "Accept": "application/json, text/plain, */*",
            "Content-Type": "application/json",
            "User-Agent": API_USER_AGENT,
            "X-Device-Id": self._device_id,
        }
        if self._token is not None:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _async_send(self, method, path, json_body=None):
        """Send one request and return ``(status, payload)``."""
        url = self._build_url(path)
        _LOGGER.debug("Sending API request %s %s", method, url)
        try:
            async with async_timeout.timeout(REQUEST_TIMEOUT_SECONDS):
                async with self._session.request(
                    method, url, json=json_body, headers=self._headers()
                ) as response:
                    if response.status == 401:
                        return response.status, None
                    if not 200 <= response.status < 300:
                        raise SurePetcareApiError(
                            f"Http error: {response.status} - {response.reason}",
                            status=response.status,
                        )
                    payload = await response.json(content_type=None)
        except aiohttp.InvalidURL as err:
            raise SurePetcareInvalidUrlError(f"Invalid URL: {url}") from err
        except (aiohttp.ClientError, asyncio.TimeoutError) as err:
            raise SurePetcareConnectionError(f"Error calling {url}: {err}") from err
        except ValueError as err:
            raise SurePetcareApiError(f"Unable to deserialize JSON response from {url}") from err
        _LOGGER.debug("Received response for %s: %s", path, payload)
        return 200, payload

    async def async_login(self):
        """Exchange the credentials for a bearer token."""
        self._token = None
        body = {
            "email_address": self._username,
            "password": self._password,
            "device_id": self._device_id,
        }
        try:
            status, payload = await self._async_send("POST", API_LOGIN, body)
        except SurePetcareApiError as err:
            if err.status == 403:
                raise SurePetcareAuthError(f"Login rejected for {self._username}") from err
            raise
        if status == 401:
            raise SurePetcareAuthError(f"Login rejected for {self._username}")
        token = ((payload or {}).get("data") or {}).get("token")
        if not token:
            raise SurePetcareAuthError("Login response without token")
        self._token = token
        _LOGGER.debug("Logged in to Sure Petcare API as %s", self._username)

    async def _async_request(self, method, path, json_body=None):
        """Authenticated request, logging in again once when the token expired."""
        if self._token is None:
            await self.async_login()
        status, payload = await self._async_send(method, path, json_body)
        if status == 401:
            _LOGGER.debug("Token rejected, logging in again")
            await self.async_login()
            status, payload = await self._async_send(method, path, json_body)
            if status == 401:
                raise SurePetcareAuthError("Token rejected after login")
        if isinstance(payload, dict) and "data" in payload:
            return payload["data"]
        return payload

    async def _async_update_topology(self):
        try:
            data = await self._async_request("GET", API_TOPOLOGY)
        except SurePetcareApiError:
            self.online = False
            raise
        if not isinstance(data, dict):
            self.online = False
            raise SurePetcareApiError(f"Unexpected topology response: {data}")
        self.topology.replace(SurePetcareTopology.from_dict(data))
        self.online = True
        self._refresh_cache[_TOPOLOGY] = self.topology
        _LOGGER.debug(
            "Topology: %s households, %s pets, %s devices",
            len(self.topology.households),
            len(self.topology.pets),
            len(self.topology.devices),
        )
        return self.topology

    async def async_update_topology_cache(self):
        async with self._lock:
            return await self._async_update_topology()

    async def async_refresh_topology(self):
        """Refresh the topology unless it was refreshed a moment ago."""
        async with self._lock:
            cached = self._refresh_cache.get(_TOPOLOGY)
            if cached is not None:
                return cached
            return await self._async_update_topology()

    async def async_update_pet_locations(self):
        """Update the position of every cached pet."""
        async with self._lock:
            pets = await self._async_request("GET", API_PET_LOCATIONS)
            if not isinstance(pets, list):
                raise SurePetcareApiError(f"Unexpected pet list response: {pets}")
            for item in pets:
                pet = self.topology.get_pet(item.get("id"))
                if pet is None:
                    _LOGGER.debug("Location for unknown pet %s", item.get("id"))
                    continue
                position = item.get("position")
                if position is not None:
                    pet.position = PetLocation.from_dict(position)
            return self.topology

    async def async_set_pet_location(self, pet, where):
        """Tell the API where ``pet`` is now."""
        location = PetLocationId(where)
        if location == PetLocationId.UNKNOWN:
            raise ValueError(f"Invalid pet location: {where}")
        since = dt_util.utcnow()
        body = {"where": int(location), "since": since.strftime("%Y-%m-%d %H:%M")}
        data = await self._async_request(
            "POST", API_PET_POSITION.format(pet_id=pet.id), body
        )
        position = PetLocation.from_dict(data if isinstance(data, dict) else {})
        if position.where == PetLocationId.UNKNOWN:
            position.where = int(location)
        if position.since is None:
            position.since = since.replace(second=0, microsecond=0)
        pet.position = position
        return position

    def retrieve_pet(self, pet_id):
        return self.topology.get_pet(pet_id)

    def retrieve_household(self, household_id):
        return self.topology.get_household(household_id)

    def retrieve_device(self, device_id):
        return self.topology.get_device(device_id)
