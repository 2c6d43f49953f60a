"""Connectivity of the account and of each Sure Petcare device."""
from homeassistant.components.binary_sensor import (
    BinarySensorDeviceClass,
    BinarySensorEntity,
)
from homeassistant.core import callback
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import COORDINATOR_TOPOLOGY, DOMAIN, KIND_DEVICE
from .entity import ObjectDiscovery, SurePetcareEntity, account_device_info


async def async_setup_entry(hass, config_entry, async_add_entities):
    coordinator = hass.data[DOMAIN][config_entry.entry_id][COORDINATOR_TOPOLOGY]
    discovery = ObjectDiscovery()
    async_add_entities([AccountOnlineBinarySensor(coordinator)])

    @callback
    def _async_add_new_devices():
        entities = [
            DeviceOnlineBinarySensor(coordinator, device)
            for _, device in discovery.new_objects(coordinator.data, (KIND_DEVICE,))
        ]
        if entities:
            async_add_entities(entities)

    _async_add_new_devices()
    config_entry.async_on_unload(coordinator.async_add_listener(_async_add_new_devices))


class AccountOnlineBinarySensor(CoordinatorEntity, BinarySensorEntity):
    """On while the last topology poll succeeded."""

    _attr_has_entity_name = True
    _attr_name = "Online"
    _attr_device_class = BinarySensorDeviceClass.CONNECTIVITY

    def __init__(self, coordinator):
        super().__init__(coordinator)
        username = coordinator.client.username
        self._attr_unique_id = f"account_{username}_online"
        self._attr_device_info = account_device_info(username)

    @property
    def available(self):
        return True

    @property
    def is_on(self):
        return self.coordinator.last_update_success and self.coordinator.client.online


class DeviceOnlineBinarySensor(SurePetcareEntity, BinarySensorEntity):
    _attr_name = "Online"
    _attr_device_class = BinarySensorDeviceClass.CONNECTIVITY

    def __init__(self, coordinator, device):
        super().__init__(coordinator, KIND_DEVICE, device, "online")

    @property
    def is_on(self):
        device = self.object
        return None if device is None else device.online
