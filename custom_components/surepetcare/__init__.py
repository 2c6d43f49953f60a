"""The Sure Petcare component."""
import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME
from homeassistant.core import HomeAssistant
from homeassistant.helpers import device_registry as dr
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .api import SurePetcareApiClient
from .const import (
    CONF_LOCATION_SCAN_INTERVAL,
    CONF_SCAN_INTERVAL,
    COORDINATOR_LOCATION,
    COORDINATOR_TOPOLOGY,
    DEFAULT_LOCATION_SCAN_INTERVAL,
    DEFAULT_SCAN_INTERVAL,
    DOMAIN,
    MANUFACTURER,
    PLATFORMS,
)
from .coordinator import SurePetcareLocationCoordinator, SurePetcareTopologyCoordinator

_LOGGER = logging.getLogger(__name__)


async def async_setup(hass: HomeAssistant, config: dict):
    """Set up the Sure Petcare component."""
    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry):
    """Set up Sure Petcare from a config entry."""
    hass.data.setdefault(DOMAIN, {})

    username = entry.data[CONF_USERNAME]
    client = SurePetcareApiClient(
        async_get_clientsession(hass), username, entry.data[CONF_PASSWORD]
    )
    topology = SurePetcareTopologyCoordinator(
        hass, client, entry.data.get(CONF_SCAN_INTERVAL, DEFAULT_SCAN_INTERVAL)
    )
    location = SurePetcareLocationCoordinator(
        hass,
        client,
        entry.data.get(CONF_LOCATION_SCAN_INTERVAL, DEFAULT_LOCATION_SCAN_INTERVAL),
    )

    # raises ConfigEntryNotReady or ConfigEntryAuthFailed
    await topology.async_config_entry_first_refresh()
    location.async_set_updated_data(client.topology)

    dr.async_get(hass).async_get_or_create(
        config_entry_id=entry.entry_id,
        identifiers={(DOMAIN, username)},
        manufacturer=MANUFACTURER,
        name=f"Sure Petcare {username}",
        model="Account",
    )

    # Store the coordinators so platforms can access them
    hass.data[DOMAIN][entry.entry_id] = {
        COORDINATOR_TOPOLOGY: topology,
        COORDINATOR_LOCATION: location,
    }

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry):
    """Unload a config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        hass.data[DOMAIN].pop(entry.entry_id)

    return unload_ok
