"""DataUpdateCoordinator for myenergi."""
from datetime import timedelta
import logging

import async_timeout
from homeassistant.exceptions import ConfigEntryAuthFailed, HomeAssistantError
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from .const import DOMAIN, UPDATE_TIMEOUT_SECONDS
from .exceptions import MyEnergiApiError, MyEnergiAuthError

_LOGGER = logging.getLogger(__name__)


class MyEnergiDataUpdateCoordinator(DataUpdateCoordinator):
    """Polls the hub topology on a fixed interval."""

    def __init__(self, hass, client, scan_interval):
        """Initialize."""
        self.client = client
        super().__init__(
            hass,
            _LOGGER,
            name=f"{DOMAIN} {client.username}",
            update_interval=timedelta(seconds=scan_interval),
        )

    async def _async_update_data(self):
        """Fetch data from API endpoint."""
        try:
            async with async_timeout.timeout(UPDATE_TIMEOUT_SECONDS):
                return await self.client.async_update_topology_cache()
        except MyEnergiAuthError as error:
            raise ConfigEntryAuthFailed(str(error)) from error
        except MyEnergiApiError as error:
            raise UpdateFailed(f"Error updating topology cache: {error}") from error

    async def async_refresh_cached(self):
        """Refresh on demand, reusing a topology fetched moments ago."""
        try:
            data = await self.client.async_refresh_topology()
        except MyEnergiApiError as error:
            raise HomeAssistantError(f"Error refreshing myenergi data: {error}") from error
        self.async_set_updated_data(data)
