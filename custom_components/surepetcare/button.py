"""Account refresh button."""
import logging

from homeassistant.components.button import ButtonEntity
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import COORDINATOR_LOCATION, COORDINATOR_TOPOLOGY, DOMAIN
from .entity import account_device_info

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(hass, config_entry, async_add_entities):
    coordinators = hass.data[DOMAIN][config_entry.entry_id]
    async_add_entities(
        [RefreshButton(coordinators[COORDINATOR_TOPOLOGY], coordinators[COORDINATOR_LOCATION])]
    )


class RefreshButton(CoordinatorEntity, ButtonEntity):
    """Re-read the topology and pet positions right away."""

    _attr_has_entity_name = True
    _attr_name = "Refresh"
    _attr_icon = "mdi:refresh"

    def __init__(self, coordinator, location_coordinator):
        super().__init__(coordinator)
        self._location_coordinator = location_coordinator
        username = coordinator.client.username
        self._attr_unique_id = f"account_{username}_refresh"
        self._attr_device_info = account_device_info(username)

    async def async_press(self):
        _LOGGER.debug("Refreshing Sure Petcare topology for %s", self.coordinator.client.username)
        await self.coordinator.async_refresh()
        await self._location_coordinator.async_refresh()
