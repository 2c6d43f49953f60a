"""Zappi charging mode selection."""
import logging

from homeassistant.components.select import SelectEntity
from homeassistant.core import callback
from homeassistant.exceptions import HomeAssistantError

from .const import DEVICE_ZAPPI, DOMAIN
from .entity import DeviceDiscovery, MyEnergiEntity
from .exceptions import MyEnergiApiError
from .models import ZappiChargingMode

_LOGGER = logging.getLogger(__name__)

CHARGING_MODE_OPTIONS = {
    "fast": ZappiChargingMode.FAST,
    "eco": ZappiChargingMode.ECO,
    "eco_plus": ZappiChargingMode.ECO_PLUS,
    "stop": ZappiChargingMode.STOP,
}
OPTION_BY_MODE = {mode: option for option, mode in CHARGING_MODE_OPTIONS.items()}


async def async_setup_entry(hass, config_entry, async_add_entities):
    coordinator = hass.data[DOMAIN][config_entry.entry_id]
    discovery = DeviceDiscovery()

    @callback
    def _async_add_new_devices():
        entities = [
            ZappiChargingModeSelect(coordinator, device.serial_number)
            for _, device in discovery.new_devices(coordinator.data, (DEVICE_ZAPPI,))
        ]
        if entities:
            async_add_entities(entities)

    _async_add_new_devices()
    config_entry.async_on_unload(coordinator.async_add_listener(_async_add_new_devices))


class ZappiChargingModeSelect(MyEnergiEntity, SelectEntity):
    """Charging mode of a Zappi."""

    _attr_name = "Charging mode"
    _attr_icon = "mdi:ev-station"
    _attr_options = list(CHARGING_MODE_OPTIONS)

    def __init__(self, coordinator, serial_number):
        super().__init__(coordinator, DEVICE_ZAPPI, serial_number, "chargingModeSelect")

    @property
    def current_option(self):
        device = self.device
        if device is None or device.charging_mode is None:
            return None
        try:
            return OPTION_BY_MODE.get(ZappiChargingMode(device.charging_mode))
        except ValueError:
            return None

    async def async_select_option(self, option):
        mode = CHARGING_MODE_OPTIONS[option]
        _LOGGER.debug("Setting zappi %s charging mode to %s", self.serial_number, mode.name)
        try:
            await self.coordinator.client.async_set_zappi_charging_mode(self.serial_number, mode)
        except MyEnergiApiError as error:
            raise HomeAssistantError(
                f"Can't set charging mode {option} for zappi {self.serial_number}: {error}"
            ) from error
        await self.coordinator.async_request_refresh()
