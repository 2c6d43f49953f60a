"""DataUpdateCoordinators for Sure Petcare."""
from datetime import timedelta
import logging

import async_timeout
from homeassistant.exceptions import ConfigEntryAuthFailed, HomeAssistantError
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from .const import DOMAIN, UPDATE_TIMEOUT_SECONDS
from .exceptions import SurePetcareApiError, SurePetcareAuthError

_LOGGER = logging.getLogger(__name__)


class SurePetcareCoordinator(DataUpdateCoordinator):
    """Shared error handling for the Sure Petcare pollers."""

    def __init__(self, hass, client, name, scan_interval):
        """Initialize."""
        self.client = client
        super().__init__(
            hass,
            _LOGGER,
            name=f"{DOMAIN} {name}",
            update_interval=timedelta(seconds=scan_interval),
        )

    async def _async_fetch(self):
        raise NotImplementedError

    async def _async_update_data(self):
        """Fetch data from API endpoint."""
        try:
            async with async_timeout.timeout(UPDATE_TIMEOUT_SECONDS):
                return await self._async_fetch()
        except SurePetcareAuthError as error:
            raise ConfigEntryAuthFailed(str(error)) from error
        except SurePetcareApiError as error:
            raise UpdateFailed(f"Error fetching data: {error}") from error


class SurePetcareTopologyCoordinator(SurePetcareCoordinator):
    """Polls households, pets and devices."""

    def __init__(self, hass, client, scan_interval):
        super().__init__(hass, client, "topology", scan_interval)

    async def _async_fetch(self):
        return await self.client.async_update_topology_cache()

    async def async_refresh_cached(self):
        """Refresh on demand, reusing a topology fetched moments ago."""
        try:
            data = await self.client.async_refresh_topology()
        except SurePetcareApiError as error:
            raise HomeAssistantError(f"Error refreshing Sure Petcare data: {error}") from error
        self.async_set_updated_data(data)


class SurePetcareLocationCoordinator(SurePetcareCoordinator):
    """Polls pet positions, more often than the topology."""

    def __init__(self, hass, client, scan_interval):
        super().__init__(hass, client, "location", scan_interval)

    async def _async_fetch(self):
        return await self.client.async_update_pet_locations()

    async def async_refresh_cached(self):
        await self.async_request_refresh()
