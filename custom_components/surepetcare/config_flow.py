"""Config flow for Sure Petcare integration."""
import logging

from homeassistant import config_entries
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME
from homeassistant.helpers.aiohttp_client import async_get_clientsession
import voluptuous as vol

from .api import SurePetcareApiClient
from .const import (
    CONF_LOCATION_SCAN_INTERVAL,
    CONF_SCAN_INTERVAL,
    DEFAULT_LOCATION_SCAN_INTERVAL,
    DEFAULT_SCAN_INTERVAL,
    DOMAIN,
    MIN_SCAN_INTERVAL,
)
from .exceptions import SurePetcareApiError, SurePetcareAuthError

_LOGGER = logging.getLogger(__name__)

_INTERVAL = vol.All(vol.Coerce(int), vol.Range(min=MIN_SCAN_INTERVAL))

DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_USERNAME): str,
        vol.Required(CONF_PASSWORD): str,
        vol.Optional(CONF_SCAN_INTERVAL, default=DEFAULT_SCAN_INTERVAL): _INTERVAL,
        vol.Optional(
            CONF_LOCATION_SCAN_INTERVAL, default=DEFAULT_LOCATION_SCAN_INTERVAL
        ): _INTERVAL,
    }
)

REAUTH_SCHEMA = vol.Schema({vol.Required(CONF_PASSWORD): str})


async def validate_input(hass, data):
    """Log in and read the topology once."""
    client = SurePetcareApiClient(
        async_get_clientsession(hass), data[CONF_USERNAME], data[CONF_PASSWORD]
    )
    await client.async_login()
    return await client.async_update_topology_cache()


class SurePetcareConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Sure Petcare."""

    VERSION = 1
    CONNECTION_CLASS = config_entries.CONN_CLASS_CLOUD_POLL

    def __init__(self):
        self._reauth_entry = None

    async def _async_validate(self, data):
        errors = {}
        try:
            await validate_input(self.hass, data)
        except SurePetcareAuthError:
            errors["base"] = "invalid_auth"
        except SurePetcareApiError as error:
            _LOGGER.warning("Can't reach Sure Petcare API: %s", error)
            errors["base"] = "cannot_connect"
        return errors

    async def async_step_user(self, user_input=None):
        """Handle the initial step."""
        errors = {}
        if user_input is not None:
            await self.async_set_unique_id(user_input[CONF_USERNAME].lower())
            self._abort_if_unique_id_configured()
            errors = await self._async_validate(user_input)
            if not errors:
                return self.async_create_entry(
                    title=user_input[CONF_USERNAME], data=user_input
                )

        return self.async_show_form(
            step_id="user", data_schema=DATA_SCHEMA, errors=errors
        )

    async def async_step_import(self, import_data):
        """Handle import from YAML."""
        return await self.async_step_user(user_input=import_data)

    async def async_step_reauth(self, entry_data):
        self._reauth_entry = self.hass.config_entries.async_get_entry(
            self.context["entry_id"]
        )
        return await self.async_step_reauth_confirm()

    async def async_step_reauth_confirm(self, user_input=None):
        errors = {}
        if user_input is not None:
            data = {**self._reauth_entry.data, CONF_PASSWORD: user_input[CONF_PASSWORD]}
            errors = await self._async_validate(data)
            if not errors:
                self.hass.config_entries.async_update_entry(self._reauth_entry, data=data)
                await self.hass.config_entries.async_reload(self._reauth_entry.entry_id)
                return self.async_abort(reason="reauth_successful")

        return self.async_show_form(
            step_id="reauth_confirm", data_schema=REAUTH_SCHEMA, errors=errors
        )
