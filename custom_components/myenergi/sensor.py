"""Platform for sensor integration."""
from collections.abc import Callable
from dataclasses import dataclass
import logging

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorEntityDescription,
    SensorStateClass,
)
from homeassistant.const import (
    EntityCategory,
    UnitOfElectricPotential,
    UnitOfEnergy,
    UnitOfFrequency,
    UnitOfPower,
    UnitOfTemperature,
)
from homeassistant.core import callback

from .const import DEVICE_EDDI, DEVICE_HARVI, DEVICE_ZAPPI, DOMAIN
from .entity import DeviceDiscovery, MyEnergiEntity

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class MyEnergiSensorEntityDescription(SensorEntityDescription):
    """Describes a myenergi sensor."""

    value_fn: Callable


def _or_zero(value):
    # power and energy channels report 0 when the hub omits the field
    return 0 if value is None else value


def _power(key, name, getter):
    return MyEnergiSensorEntityDescription(
        key=key,
        name=name,
        native_unit_of_measurement=UnitOfPower.WATT,
        device_class=SensorDeviceClass.POWER,
        state_class=SensorStateClass.MEASUREMENT,
        value_fn=lambda device: _or_zero(getter(device)),
    )


def _energy(key, name, getter):
    return MyEnergiSensorEntityDescription(
        key=key,
        name=name,
        native_unit_of_measurement=UnitOfEnergy.KILO_WATT_HOUR,
        device_class=SensorDeviceClass.ENERGY,
        state_class=SensorStateClass.TOTAL,
        value_fn=lambda device: _or_zero(getter(device)),
    )


def _boost_target(key, name, getter):
    # a setpoint, kept out of long-term energy statistics
    return MyEnergiSensorEntityDescription(
        key=key,
        name=name,
        icon="mdi:battery-charging",
        native_unit_of_measurement=UnitOfEnergy.KILO_WATT_HOUR,
        value_fn=lambda device: _or_zero(getter(device)),
    )


def _plain(key, name, getter, icon=None, category=None):
    return MyEnergiSensorEntityDescription(
        key=key,
        name=name,
        icon=icon,
        entity_category=category,
        value_fn=getter,
    )


def _clamps(count, with_phases=False):
    descriptions = []
    for index in range(count):
        number = index + 1
        descriptions.append(
            _plain(
                f"clampName{number}",
                f"Clamp {number} name",
                lambda device, i=index: device.clamp_names[i],
                "mdi:current-ac",
                EntityCategory.DIAGNOSTIC,
            )
        )
        descriptions.append(
            _power(
                f"clampPower{number}",
                f"Clamp {number} power",
                lambda device, i=index: device.clamp_powers[i],
            )
        )
        if with_phases:
            descriptions.append(
                _plain(
                    f"clampPhase{number}",
                    f"Clamp {number} phase",
                    lambda device, i=index: device.clamp_phases[i],
                    "mdi:sine-wave",
                    EntityCategory.DIAGNOSTIC,
                )
            )
    return descriptions


LAST_UPDATED = MyEnergiSensorEntityDescription(
    key="lastUpdatedTime",
    name="Last updated",
    device_class=SensorDeviceClass.TIMESTAMP,
    entity_category=EntityCategory.DIAGNOSTIC,
    value_fn=lambda device: device.last_update_time,
)

ZAPPI_SENSORS = (
    LAST_UPDATED,
    MyEnergiSensorEntityDescription(
        key="supplyVoltage",
        name="Supply voltage",
        native_unit_of_measurement=UnitOfElectricPotential.VOLT,
        device_class=SensorDeviceClass.VOLTAGE,
        state_class=SensorStateClass.MEASUREMENT,
        value_fn=lambda device: _or_zero(device.supply_voltage),
    ),
    MyEnergiSensorEntityDescription(
        key="supplyFrequency",
        name="Supply frequency",
        native_unit_of_measurement=UnitOfFrequency.HERTZ,
        device_class=SensorDeviceClass.FREQUENCY,
        state_class=SensorStateClass.MEASUREMENT,
        value_fn=lambda device: _or_zero(device.supply_frequency),
    ),
    _plain("numberOfPhases", "Number of phases", lambda d: d.number_of_phases, "mdi:sine-wave"),
    _plain("lockingMode", "Locking mode", lambda d: d.locking_mode, "mdi:lock"),
    _plain("chargingMode", "Charging mode code", lambda d: d.charging_mode, "mdi:ev-station"),
    _plain("status", "Status", lambda d: d.status, "mdi:information-outline"),
    _plain("plugStatus", "Plug status", lambda d: d.plug_status, "mdi:power-plug"),
    _plain(
        "commandTries",
        "Command tries",
        lambda d: d.command_tries,
        "mdi:counter",
        EntityCategory.DIAGNOSTIC,
    ),
    _plain("diverterPriority", "Diverter priority", lambda d: d.diverter_priority, "mdi:priority-high"),
    _plain("minimumGreenLevel", "Minimum green level", lambda d: d.minimum_green_level, "mdi:leaf"),
    _power("gridPower", "Grid power", lambda d: d.grid_power),
    _power("generatedPower", "Generated power", lambda d: d.generated_power),
    _power("divertedPower", "Diverted power", lambda d: d.diverted_power),
    _energy("chargeAdded", "Charge added", lambda d: d.charge_added),
    _plain("smartBoostTime", "Smart boost time", lambda d: d.smart_boost_time, "mdi:clock-outline"),
    _boost_target("smartBoostCharge", "Smart boost charge", lambda d: d.smart_boost_charge),
    _plain("timedBoostTime", "Timed boost time", lambda d: d.timed_boost_time, "mdi:clock-outline"),
    _boost_target("timedBoostCharge", "Timed boost charge", lambda d: d.timed_boost_charge),
    *_clamps(6),
)

HARVI_SENSORS = (
    LAST_UPDATED,
    *_clamps(3, with_phases=True),
)

EDDI_SENSORS = (
    LAST_UPDATED,
    _power("divertedPower", "Diverted power", lambda d: d.diverted_power),
    _plain("status", "Status", lambda d: d.status, "mdi:information-outline"),
    _energy("energyTransferred", "Energy transferred", lambda d: d.energy_transferred),
    MyEnergiSensorEntityDescription(
        key="tankTemperature1",
        name="Tank 1 temperature",
        native_unit_of_measurement=UnitOfTemperature.CELSIUS,
        device_class=SensorDeviceClass.TEMPERATURE,
        state_class=SensorStateClass.MEASUREMENT,
        value_fn=lambda d: d.tank_temperature_1,
    ),
    MyEnergiSensorEntityDescription(
        key="tankTemperature2",
        name="Tank 2 temperature",
        native_unit_of_measurement=UnitOfTemperature.CELSIUS,
        device_class=SensorDeviceClass.TEMPERATURE,
        state_class=SensorStateClass.MEASUREMENT,
        value_fn=lambda d: d.tank_temperature_2,
    ),
    *_clamps(3),
)

SENSORS = {
    DEVICE_ZAPPI: ZAPPI_SENSORS,
    DEVICE_HARVI: HARVI_SENSORS,
    DEVICE_EDDI: EDDI_SENSORS,
}


async def async_setup_entry(hass, config_entry, async_add_entities):
    """Set up myenergi sensors, adding new devices as the hub reports them."""
    coordinator = hass.data[DOMAIN][config_entry.entry_id]
    discovery = DeviceDiscovery()

    @callback
    def _async_add_new_devices():
        entities = []
        for device_type, device in discovery.new_devices(coordinator.data):
            _LOGGER.debug("Discovered %s: %s", device_type, device.serial_number)
            entities.extend(
                MyEnergiSensor(coordinator, device_type, device.serial_number, description)
                for description in SENSORS[device_type]
            )
        if entities:
            async_add_entities(entities)

    _async_add_new_devices()
    config_entry.async_on_unload(coordinator.async_add_listener(_async_add_new_devices))


class MyEnergiSensor(MyEnergiEntity, SensorEntity):
    """A single channel of a Zappi, Harvi or Eddi."""

    entity_description: MyEnergiSensorEntityDescription

    def __init__(self, coordinator, device_type, serial_number, description):
        """Initialize the sensor."""
        super().__init__(coordinator, device_type, serial_number, description.key)
        self.entity_description = description

    @property
    def native_value(self):
        device = self.device
        if device is None:
            return None
        return self.entity_description.value_fn(device)
