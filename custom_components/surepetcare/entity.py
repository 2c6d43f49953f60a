"""Base entities for Sure Petcare."""
from homeassistant.helpers.entity import DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN, KIND_DEVICE, KIND_HOUSEHOLD, KIND_PET, MANUFACTURER


def account_device_info(username):
    return DeviceInfo(
        identifiers={(DOMAIN, username)},
        name=f"Sure Petcare {username}",
        manufacturer=MANUFACTURER,
        model="Account",
    )


class ObjectDiscovery:
    """Remember which pets, households and devices already have entities."""

    def __init__(self):
        self._known = set()

    def new_objects(self, topology, kinds=None):
        found = []
        for kind, obj in topology.objects():
            if kinds is not None and kind not in kinds:
                continue
            if (kind, obj.id) in self._known:
                continue
            self._known.add((kind, obj.id))
            found.append((kind, obj))
        return found


class SurePetcareEntity(CoordinatorEntity):
    """An entity bound to one pet, household or device."""

    _attr_has_entity_name = True

    def __init__(self, coordinator, kind, obj, key, topology_coordinator=None):
        """Initialize the entity.

        Entities polled by the location coordinator also pass the topology
        coordinator, since every topology poll carries fresh pet positions.
        """
        super().__init__(coordinator)
        self._topology_coordinator = topology_coordinator
        self.kind = kind
        self.object_id = obj.id
        self._attr_unique_id = f"{kind}_{obj.id}_{key}"
        model = obj.product_name if kind == KIND_DEVICE else kind.title()
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, f"{kind}_{obj.id}")},
            name=obj.name or f"{kind.title()} {obj.id}",
            manufacturer=MANUFACTURER,
            model=model,
            via_device=(DOMAIN, coordinator.client.username),
        )

    @property
    def object(self):
        client = self.coordinator.client
        if self.kind == KIND_PET:
            return client.retrieve_pet(self.object_id)
        if self.kind == KIND_HOUSEHOLD:
            return client.retrieve_household(self.object_id)
        return client.retrieve_device(self.object_id)

    async def async_added_to_hass(self):
        await super().async_added_to_hass()
        if self._topology_coordinator is not None:
            self.async_on_remove(
                self._topology_coordinator.async_add_listener(self._handle_coordinator_update)
            )

    @property
    def available(self):
        updated = super().available
        if self._topology_coordinator is not None:
            updated = updated or self._topology_coordinator.last_update_success
        return updated and self.object is not None

    async def async_update(self):
        """Handle a manual refresh request."""
        await self.coordinator.async_refresh_cached()
