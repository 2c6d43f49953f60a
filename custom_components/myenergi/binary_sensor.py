"""Hub connectivity."""
from homeassistant.components.binary_sensor import (
    BinarySensorDeviceClass,
    BinarySensorEntity,
)
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN
from .entity import hub_device_info


async def async_setup_entry(hass, config_entry, async_add_entities):
    coordinator = hass.data[DOMAIN][config_entry.entry_id]
    async_add_entities([HubOnlineBinarySensor(coordinator)])


class HubOnlineBinarySensor(CoordinatorEntity, BinarySensorEntity):
    """On while the last topology poll succeeded."""

    _attr_has_entity_name = True
    _attr_name = "Online"
    _attr_device_class = BinarySensorDeviceClass.CONNECTIVITY

    def __init__(self, coordinator):
        super().__init__(coordinator)
        username = coordinator.client.username
        self._attr_unique_id = f"hub_{username}_online"
        self._attr_device_info = hub_device_info(username)

    @property
    def available(self):
        # reports offline instead of going unavailable
        return True

    @property
    def is_on(self):
        return self.coordinator.last_update_success and self.coordinator.client.online
