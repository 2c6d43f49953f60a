"""Pet location selection."""
import logging

from homeassistant.components.select import SelectEntity
from homeassistant.core import callback
from homeassistant.exceptions import HomeAssistantError

from .const import COORDINATOR_LOCATION, COORDINATOR_TOPOLOGY, DOMAIN, KIND_PET
from .entity import ObjectDiscovery, SurePetcareEntity
from .exceptions import SurePetcareApiError
from .models import PetLocationId

_LOGGER = logging.getLogger(__name__)

LOCATION_OPTIONS = {
    PetLocationId.INSIDE.label: PetLocationId.INSIDE,
    PetLocationId.OUTSIDE.label: PetLocationId.OUTSIDE,
}


async def async_setup_entry(hass, config_entry, async_add_entities):
    coordinators = hass.data[DOMAIN][config_entry.entry_id]
    topology_coordinator = coordinators[COORDINATOR_TOPOLOGY]
    discovery = ObjectDiscovery()

    @callback
    def _async_add_new_pets():
        entities = [
            PetLocationSelect(coordinators[COORDINATOR_LOCATION], pet, topology_coordinator)
            for _, pet in discovery.new_objects(topology_coordinator.data, (KIND_PET,))
        ]
        if entities:
            async_add_entities(entities)

    _async_add_new_pets()
    config_entry.async_on_unload(topology_coordinator.async_add_listener(_async_add_new_pets))


class PetLocationSelect(SurePetcareEntity, SelectEntity):
    """Set whether a pet is inside or outside."""

    _attr_name = "Set location"
    _attr_icon = "mdi:home-export-outline"
    _attr_options = list(LOCATION_OPTIONS)

    def __init__(self, coordinator, pet, topology_coordinator=None):
        super().__init__(
            coordinator, KIND_PET, pet, "locationSelect", topology_coordinator=topology_coordinator
        )

    @property
    def current_option(self):
        pet = self.object
        if pet is None:
            return None
        label = pet.position.location.label
        return label if label in LOCATION_OPTIONS else None

    async def async_select_option(self, option):
        pet = self.object
        if pet is None:
            raise HomeAssistantError(f"Unknown pet: {self.object_id}")
        location = LOCATION_OPTIONS[option]
        _LOGGER.debug("Setting location of pet %s to %s", pet.id, option)
        try:
            await self.coordinator.client.async_set_pet_location(pet, location)
        except SurePetcareApiError as error:
            raise HomeAssistantError(
                f"Can't update location {option} for pet {pet.name}: {error}"
            ) from error
        self.coordinator.async_set_updated_data(self.coordinator.client.topology)
