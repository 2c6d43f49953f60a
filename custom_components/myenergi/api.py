"""Client for the myenergi cloud API."""
import asyncio
import json
import logging
import re
from urllib.parse import urlsplit

import aiohttp
import async_timeout
from cachetools import TTLCache

from .const import (
    API_ASN_HEADER,
    API_HOST_TEMPLATE,
    API_STATUS,
    API_USER_AGENT,
    API_ZAPPI_HISTORY_HOUR,
    API_ZAPPI_HISTORY_MINUTE,
    API_ZAPPI_MODE,
    MAX_ATTEMPTS,
    REFRESH_CACHE_SECONDS,
    REQUEST_TIMEOUT_SECONDS,
)
from .digest import build_authorization, parse_challenge
from .exceptions import (
    MyEnergiApiError,
    MyEnergiAuthError,
    MyEnergiCommandError,
    MyEnergiConnectionError,
    MyEnergiInvalidUrlError,
    MyEnergiResponseError,
)
from .models import (
    CommandStatus,
    MyEnergiData,
    ZappiBoostMode,
    ZappiChargingMode,
    ZappiHistory,
    parse_device_summary_list,
)

_LOGGER = logging.getLogger(__name__)

_TOPOLOGY = "topology"
_DEPARTURE_TIME = re.compile(r"^([01]\d|2[0-3])[0-5]\d$")


def default_host(username):
    """Director host for a hub serial number: s<last digit>.myenergi.net."""
    if not username:
        raise MyEnergiInvalidUrlError("A hub serial number is required")
    return API_HOST_TEMPLATE.format(username[-1])


class MyEnergiApiClient:
    """Polls a myenergi hub through the cloud API using digest auth."""

    def __init__(self, session, username, password, host=None, base_url=None):
        self._session = session
        self._username = username
        self._password = password
        self._fixed_base_url = base_url is not None
        if base_url is None:
            base_url = f"https://{host or default_host(username)}/"
        self._base_url = base_url
        self._lock = asyncio.Lock()
        self._refresh_cache = TTLCache(maxsize=1, ttl=REFRESH_CACHE_SECONDS)
        self.data = MyEnergiData()
        self.online = False

    @property
    def username(self):
        return self._username

    @property
    def base_url(self):
        return self._base_url

    def _build_url(self, path):
        parts = urlsplit(self._base_url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise MyEnergiInvalidUrlError(f"Invalid URL for API call: {self._base_url}")
        return self._base_url.rstrip("/") + path

    def _update_asn(self, headers):
        asn = headers.get(API_ASN_HEADER)
        if self._fixed_base_url or not asn or asn == "undefined":
            return
        base_url = f"https://{asn}/"
        if base_url != self._base_url:
            _LOGGER.debug("API server for hub %s moved to %s", self._username, asn)
            self._base_url = base_url

    async def _async_get(self, path):
        """GET ``path``, answering the digest challenge, and decode JSON."""
        url = self._build_url(path)
        authorization = None
        for attempt in range(1, MAX_ATTEMPTS + 1):
            headers = {
                "Accept": "application/json",
                "User-Agent": API_USER_AGENT,
            }
            if authorization is not None:
                headers["Authorization"] = authorization
            _LOGGER.debug("Sending API request %s (attempt %s)", url, attempt)
            try:
                async with async_timeout.timeout(REQUEST_TIMEOUT_SECONDS):
                    async with self._session.get(
                        url, headers=headers, allow_redirects=False
                    ) as response:
                        self._update_asn(response.headers)
                        if response.status == 401:
                            challenge_header = response.headers.get("WWW-Authenticate")
                            if challenge_header is None:
                                raise MyEnergiResponseError(
                                    "401 without a digest challenge", status=401
                                )
                            challenge = parse_challenge(challenge_header)
                            stale = challenge.get("stale", "").lower() == "true"
                            if authorization is not None and not stale:
                                raise MyEnergiAuthError(
                                    f"Invalid username or password for hub {self._username}"
                                )
                            authorization = build_authorization(
                                challenge, "GET", path, self._username, self._password
                            )
                            continue
                        if not 200 <= response.status < 300:
                            raise MyEnergiResponseError(
                                f"Http error: {response.status} - {response.reason}",
                                status=response.status,
                            )
                        body = await response.text()
            except aiohttp.InvalidURL as err:
                raise MyEnergiInvalidUrlError(f"Invalid URL: {url}") from err
            except (aiohttp.ClientError, asyncio.TimeoutError) as err:
                raise MyEnergiConnectionError(f"Error calling {url}: {err}") from err

            _LOGGER.debug("Received response for %s: %s", path, body)
            try:
                return json.loads(body)
            except ValueError as err:
                raise MyEnergiResponseError(
                    f"Unable to deserialize JSON response: {body}"
                ) from err

        # only stale nonces end up here, the credentials were never rejected
        raise MyEnergiResponseError(
            f"Can't execute API call after {MAX_ATTEMPTS} attempts", status=401
        )

    async def async_get_device_summary_list(self):
        payload = await self._async_get(API_STATUS)
        summaries = parse_device_summary_list(payload)
        _LOGGER.debug("Device summary list: %s", summaries)
        return summaries

    async def _async_update_topology(self):
        try:
            summaries = await self.async_get_device_summary_list()
        except MyEnergiApiError:
            self.online = False
            raise
        self.data.clear()
        for summary in summaries:
            self.data.merge(summary)
        self.online = True
        self._refresh_cache[_TOPOLOGY] = self.data
        return self.data

    async def async_update_topology_cache(self):
        """Fetch the hub status and replace the topology cache."""
        async with self._lock:
            return await self._async_update_topology()

    async def async_refresh_topology(self):
        """Refresh the topology unless it was refreshed a moment ago."""
        async with self._lock:
            cached = self._refresh_cache.get(_TOPOLOGY)
            if cached is not None:
                _LOGGER.debug("Reusing topology fetched less than %ss ago", REFRESH_CACHE_SECONDS)
                return cached
            return await self._async_update_topology()

    async def _async_command(self, path):
        payload = await self._async_get(path)
        if not isinstance(payload, dict):
            raise MyEnergiResponseError(f"Unexpected command response: {payload}")
        status = CommandStatus.from_dict(payload)
        _LOGGER.debug("Command %s answered %s", path, status)
        if status.status != 0:
            raise MyEnergiCommandError(
                f"Command refused ({status.status}): {status.status_text}",
                status=status.status,
            )
        return status

    async def async_set_zappi_charging_mode(self, serial_number, mode):
        mode = ZappiChargingMode(mode)
        if mode == ZappiChargingMode.BOOST:
            raise ValueError("Use async_set_zappi_boost_mode to start a boost")
        path = API_ZAPPI_MODE.format(
            serial=serial_number, mode=int(mode), boost=0, kwh=0, departure="0000"
        )
        return await self._async_command(path)

    async def async_set_zappi_boost_mode(
        self, serial_number, boost_mode, kwh, departure_time=None
    ):
        boost_mode = ZappiBoostMode(boost_mode)
        if kwh < 0:
            raise ValueError(f"Invalid boost energy: {kwh}")
        if departure_time is None:
            departure_time = "0000"
        elif not _DEPARTURE_TIME.match(departure_time):
            raise ValueError(f"Invalid departure time {departure_time}, expected HHMM")
        path = API_ZAPPI_MODE.format(
            serial=serial_number,
            mode=int(ZappiChargingMode.BOOST),
            boost=int(boost_mode),
            kwh=int(kwh),
            departure=departure_time,
        )
        return await self._async_command(path)

    async def _async_history(self, template, serial_number, day):
        path = template.format(serial=serial_number, day=day.strftime("%Y-%m-%d"))
        payload = await self._async_get(path)
        try:
            return ZappiHistory.from_dict(payload)
        except ValueError as err:
            raise MyEnergiResponseError(
                f"Unable to deserialize history response: {payload}"
            ) from err

    async def async_get_zappi_history_by_hour(self, serial_number, day):
        return await self._async_history(API_ZAPPI_HISTORY_HOUR, serial_number, day)

    async def async_get_zappi_history_by_minute(self, serial_number, day):
        return await self._async_history(API_ZAPPI_HISTORY_MINUTE, serial_number, day)
