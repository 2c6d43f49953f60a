"""Hub refresh button."""
import logging

from homeassistant.components.button import ButtonEntity
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN
from .entity import hub_device_info

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(hass, config_entry, async_add_entities):
    coordinator = hass.data[DOMAIN][config_entry.entry_id]
    async_add_entities([HubRefreshButton(coordinator)])


class HubRefreshButton(CoordinatorEntity, ButtonEntity):
    """Re-read the topology from the API right away."""

    _attr_has_entity_name = True
    _attr_name = "Refresh"
    _attr_icon = "mdi:refresh"

    def __init__(self, coordinator):
        super().__init__(coordinator)
        username = coordinator.client.username
        self._attr_unique_id = f"hub_{username}_refresh"
        self._attr_device_info = hub_device_info(username)

    async def async_press(self):
        _LOGGER.debug("Refreshing topology of hub %s", self.coordinator.client.username)
        await self.coordinator.async_refresh()
