"""Base entity for myenergi."""
from homeassistant.helpers.entity import DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN, MANUFACTURER


def hub_device_info(username):
    return DeviceInfo(
        identifiers={(DOMAIN, username)},
        name=f"myenergi hub {username}",
        manufacturer=MANUFACTURER,
        model="Hub",
    )


class DeviceDiscovery:
    """Remember which devices already have entities.

    ``new_devices`` returns only devices not seen on earlier polls, once
    each, even if the API reports the same serial number twice.
    """

    def __init__(self):
        self._known = set()

    def new_devices(self, data, device_types=None):
        found = []
        for device_type, device in data.devices():
            if device_types is not None and device_type not in device_types:
                continue
            key = (device_type, device.serial_number)
            if key in self._known:
                continue
            self._known.add(key)
            found.append((device_type, device))
        return found


class MyEnergiEntity(CoordinatorEntity):
    """An entity bound to one device of the hub."""

    _attr_has_entity_name = True

    def __init__(self, coordinator, device_type, serial_number, key):
        """Initialize the entity."""
        super().__init__(coordinator)
        self.device_type = device_type
        self.serial_number = serial_number
        self._attr_unique_id = f"{device_type}_{serial_number}_{key}"
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, serial_number)},
            name=f"{device_type.title()} {serial_number}",
            manufacturer=MANUFACTURER,
            model=device_type.title(),
            via_device=(DOMAIN, coordinator.client.username),
        )

    @property
    def device(self):
        return self.coordinator.data.get_device(self.device_type, self.serial_number)

    @property
    def available(self):
        return super().available and self.device is not None

    async def async_update(self):
        """Handle a manual refresh request."""
        await self.coordinator.async_refresh_cached()
