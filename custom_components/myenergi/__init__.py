"""The myenergi component."""
import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME
from homeassistant.core import HomeAssistant, SupportsResponse
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import device_registry as dr
from homeassistant.helpers.aiohttp_client import async_get_clientsession
import homeassistant.helpers.config_validation as cv
from homeassistant.util import dt as dt_util
import voluptuous as vol

from .api import MyEnergiApiClient
from .const import (
    ATTR_BOOST_MODE,
    ATTR_DATE,
    ATTR_DEPARTURE_TIME,
    ATTR_KWH,
    ATTR_RESOLUTION,
    ATTR_SERIAL_NUMBER,
    CONF_HOST,
    CONF_SCAN_INTERVAL,
    DEFAULT_SCAN_INTERVAL,
    DOMAIN,
    MANUFACTURER,
    PLATFORMS,
    SERVICE_GET_HISTORY,
    SERVICE_SET_BOOST,
)
from .coordinator import MyEnergiDataUpdateCoordinator
from .exceptions import MyEnergiApiError, MyEnergiDeviceNotFoundError
from .models import ZappiBoostMode

_LOGGER = logging.getLogger(__name__)

SET_BOOST_SCHEMA = vol.Schema(
    {
        vol.Required(ATTR_SERIAL_NUMBER): cv.string,
        vol.Required(ATTR_BOOST_MODE): vol.In(["manual", "smart", "stop"]),
        vol.Optional(ATTR_KWH, default=0): vol.All(vol.Coerce(int), vol.Range(min=0, max=99)),
        vol.Optional(ATTR_DEPARTURE_TIME): vol.Match(r"^([01]\d|2[0-3])[0-5]\d$"),
    }
)

GET_HISTORY_SCHEMA = vol.Schema(
    {
        vol.Required(ATTR_SERIAL_NUMBER): cv.string,
        vol.Optional(ATTR_DATE): cv.date,
        vol.Optional(ATTR_RESOLUTION, default="hour"): vol.In(["hour", "minute"]),
    }
)


async def async_setup(hass: HomeAssistant, config: dict):
    """Set up the myenergi component."""
    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry):
    """Set up myenergi from a config entry."""
    hass.data.setdefault(DOMAIN, {})

    username = entry.data[CONF_USERNAME]
    client = MyEnergiApiClient(
        async_get_clientsession(hass),
        username,
        entry.data[CONF_PASSWORD],
        host=entry.data.get(CONF_HOST) or None,
    )
    coordinator = MyEnergiDataUpdateCoordinator(
        hass, client, entry.data.get(CONF_SCAN_INTERVAL, DEFAULT_SCAN_INTERVAL)
    )

    # raises ConfigEntryNotReady or ConfigEntryAuthFailed
    await coordinator.async_config_entry_first_refresh()

    dr.async_get(hass).async_get_or_create(
        config_entry_id=entry.entry_id,
        identifiers={(DOMAIN, username)},
        manufacturer=MANUFACTURER,
        name=f"myenergi hub {username}",
        model="Hub",
    )

    # Store the coordinator so platforms can access it
    hass.data[DOMAIN][entry.entry_id] = coordinator

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    _async_register_services(hass)

    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry):
    """Unload a config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        hass.data[DOMAIN].pop(entry.entry_id)
        if not hass.data[DOMAIN]:
            hass.services.async_remove(DOMAIN, SERVICE_SET_BOOST)
            hass.services.async_remove(DOMAIN, SERVICE_GET_HISTORY)

    return unload_ok


def _find_coordinator(hass, serial_number):
    for coordinator in hass.data.get(DOMAIN, {}).values():
        if coordinator.client.data.get_zappi_by_serial_number(serial_number) is not None:
            return coordinator
    raise HomeAssistantError(str(MyEnergiDeviceNotFoundError(serial_number)))


def _async_register_services(hass):
    if hass.services.has_service(DOMAIN, SERVICE_SET_BOOST):
        return

    async def async_set_boost(call):
        serial_number = call.data[ATTR_SERIAL_NUMBER]
        coordinator = _find_coordinator(hass, serial_number)
        boost_mode = ZappiBoostMode[call.data[ATTR_BOOST_MODE].upper()]
        try:
            await coordinator.client.async_set_zappi_boost_mode(
                serial_number,
                boost_mode,
                call.data[ATTR_KWH],
                call.data.get(ATTR_DEPARTURE_TIME),
            )
        except MyEnergiApiError as error:
            raise HomeAssistantError(f"Can't set boost for zappi {serial_number}: {error}") from error
        await coordinator.async_request_refresh()

    async def async_get_history(call):
        serial_number = call.data[ATTR_SERIAL_NUMBER]
        coordinator = _find_coordinator(hass, serial_number)
        day = call.data.get(ATTR_DATE) or dt_util.now().date()
        client = coordinator.client
        try:
            if call.data[ATTR_RESOLUTION] == "minute":
                history = await client.async_get_zappi_history_by_minute(serial_number, day)
            else:
                history = await client.async_get_zappi_history_by_hour(serial_number, day)
        except MyEnergiApiError as error:
            raise HomeAssistantError(f"Can't read history of zappi {serial_number}: {error}") from error
        return {
            "serial_number": serial_number,
            "imported_kwh": round(history.total_imported_kwh(), 3),
            "diverted_kwh": round(history.total_diverted_kwh(), 3),
            "entries": [entry.as_dict() for entry in history.entries],
        }

    hass.services.async_register(
        DOMAIN, SERVICE_SET_BOOST, async_set_boost, schema=SET_BOOST_SCHEMA
    )
    hass.services.async_register(
        DOMAIN,
        SERVICE_GET_HISTORY,
        async_get_history,
        schema=GET_HISTORY_SCHEMA,
        supports_response=SupportsResponse.ONLY,
    )
