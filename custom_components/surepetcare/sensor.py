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
from homeassistant.const import EntityCategory, UnitOfElectricPotential
from homeassistant.core import callback

from .const import (
    COORDINATOR_LOCATION,
    COORDINATOR_TOPOLOGY,
    DOMAIN,
    KIND_DEVICE,
    KIND_HOUSEHOLD,
    KIND_PET,
)
from .entity import ObjectDiscovery, SurePetcareEntity
from .models import PetLocationId

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class SurePetcareSensorEntityDescription(SensorEntityDescription):
    """Describes a Sure Petcare sensor."""

    value_fn: Callable
    coordinator: str = COORDINATOR_TOPOLOGY


PET_SENSORS = (
    SurePetcareSensorEntityDescription(
        key="name",
        name="Name",
        icon="mdi:paw",
        value_fn=lambda pet: pet.name,
    ),
    SurePetcareSensorEntityDescription(
        key="location",
        name="Location",
        icon="mdi:home-map-marker",
        device_class=SensorDeviceClass.ENUM,
        options=[location.label for location in PetLocationId],
        coordinator=COORDINATOR_LOCATION,
        value_fn=lambda pet: pet.position.location.label,
    ),
    SurePetcareSensorEntityDescription(
        key="locationChanged",
        name="Location changed",
        device_class=SensorDeviceClass.TIMESTAMP,
        coordinator=COORDINATOR_LOCATION,
        value_fn=lambda pet: pet.position.since,
    ),
    SurePetcareSensorEntityDescription(
        key="gender",
        name="Gender",
        icon="mdi:gender-male-female",
        value_fn=lambda pet: pet.gender_name,
    ),
    SurePetcareSensorEntityDescription(
        key="species",
        name="Species",
        icon="mdi:paw",
        value_fn=lambda pet: pet.species_name,
    ),
    SurePetcareSensorEntityDescription(
        key="breed",
        name="Breed",
        icon="mdi:paw",
        entity_category=EntityCategory.DIAGNOSTIC,
        value_fn=lambda pet: pet.breed_id,
    ),
    SurePetcareSensorEntityDescription(
        key="weight",
        name="Weight",
        icon="mdi:weight",
        value_fn=lambda pet: pet.weight or None,
    ),
    SurePetcareSensorEntityDescription(
        key="comment",
        name="Comment",
        icon="mdi:comment-text-outline",
        value_fn=lambda pet: pet.comments or None,
    ),
    SurePetcareSensorEntityDescription(
        key="tagIdentifier",
        name="Tag",
        icon="mdi:tag",
        entity_category=EntityCategory.DIAGNOSTIC,
        value_fn=lambda pet: pet.tag.tag or pet.tag_id,
    ),
    SurePetcareSensorEntityDescription(
        key="photoUrl",
        name="Photo",
        icon="mdi:image",
        entity_category=EntityCategory.DIAGNOSTIC,
        value_fn=lambda pet: pet.photo.location or None,
    ),
)

HOUSEHOLD_SENSORS = (
    SurePetcareSensorEntityDescription(
        key="name",
        name="Name",
        icon="mdi:home",
        value_fn=lambda household: household.name,
    ),
    SurePetcareSensorEntityDescription(
        key="timezoneId",
        name="Time zone",
        icon="mdi:map-clock",
        entity_category=EntityCategory.DIAGNOSTIC,
        value_fn=lambda household: household.timezone_id,
    ),
)

DEVICE_SENSORS = (
    SurePetcareSensorEntityDescription(
        key="battery",
        name="Battery voltage",
        native_unit_of_measurement=UnitOfElectricPotential.VOLT,
        device_class=SensorDeviceClass.VOLTAGE,
        state_class=SensorStateClass.MEASUREMENT,
        entity_category=EntityCategory.DIAGNOSTIC,
        value_fn=lambda device: device.battery,
    ),
    SurePetcareSensorEntityDescription(
        key="product",
        name="Product",
        icon="mdi:information-outline",
        entity_category=EntityCategory.DIAGNOSTIC,
        value_fn=lambda device: device.product_name,
    ),
)

SENSORS = {
    KIND_PET: PET_SENSORS,
    KIND_HOUSEHOLD: HOUSEHOLD_SENSORS,
    KIND_DEVICE: DEVICE_SENSORS,
}


async def async_setup_entry(hass, config_entry, async_add_entities):
    """Set up Sure Petcare sensors, adding objects as the API reports them."""
    coordinators = hass.data[DOMAIN][config_entry.entry_id]
    topology_coordinator = coordinators[COORDINATOR_TOPOLOGY]
    discovery = ObjectDiscovery()

    @callback
    def _async_add_new_objects():
        entities = []
        for kind, obj in discovery.new_objects(topology_coordinator.data):
            _LOGGER.debug("Discovered %s: %s", kind, obj.id)
            for description in SENSORS[kind]:
                if kind == KIND_DEVICE and description.key == "battery" and obj.battery is None:
                    continue
                topology = None
                if description.coordinator == COORDINATOR_LOCATION:
                    topology = topology_coordinator
                entities.append(
                    SurePetcareSensor(
                        coordinators[description.coordinator],
                        kind,
                        obj,
                        description,
                        topology_coordinator=topology,
                    )
                )
        if entities:
            async_add_entities(entities)

    _async_add_new_objects()
    config_entry.async_on_unload(
        topology_coordinator.async_add_listener(_async_add_new_objects)
    )


class SurePetcareSensor(SurePetcareEntity, SensorEntity):
    """A single channel of a pet, household or device."""

    entity_description: SurePetcareSensorEntityDescription

    def __init__(self, coordinator, kind, obj, description, topology_coordinator=None):
        """Initialize the sensor."""
        super().__init__(
            coordinator, kind, obj, description.key, topology_coordinator=topology_coordinator
        )
        self.entity_description = description

    @property
    def native_value(self):
        obj = self.object
        if obj is None:
            return None
        return self.entity_description.value_fn(obj)
