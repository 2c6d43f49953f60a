"""Objects returned by the Sure Petcare API and the topology cache.

Example pet as returned by ``/me/start``::

    {
        "id": 34675, "name": "Cat", "gender": 0, "comments": "",
        "household_id": 87435, "breed_id": 382, "photo_id": 23412,
        "species_id": 1, "tag_id": 234523,
        "photo": {"id": 23412, "location": "https://..."},
        "position": {"tag_id": 234523, "device_id": 876348, "where": 2,
                     "since": "2019-09-11T09:24:13+00:00"}
    }
"""
from dataclasses import dataclass, field
from enum import IntEnum

from homeassistant.util import dt as dt_util

from .const import KIND_DEVICE, KIND_HOUSEHOLD, KIND_PET
from .exceptions import SurePetcareNotFoundError


class _LookupEnum(IntEnum):
    @classmethod
    def find_by_id(cls, value):
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    @property
    def label(self):
        return self.name.lower()


class PetGender(_LookupEnum):
    UNKNOWN = -1
    FEMALE = 0
    MALE = 1


class PetSpecies(_LookupEnum):
    UNKNOWN = 0
    CAT = 1
    DOG = 2


class PetLocationId(_LookupEnum):
    UNKNOWN = 0
    INSIDE = 1
    OUTSIDE = 2


class ProductId(_LookupEnum):
    UNKNOWN = 0
    HUB = 1
    REPEATER = 2
    PET_FLAP = 3
    FEEDER = 4
    PROGRAMMER = 5
    DUAL_SCAN_CONNECT = 6


def _int(value, default=None):
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def parse_timestamp(value):
    """Parse an API timestamp; naive values are taken as UTC."""
    if not value:
        return None
    parsed = dt_util.parse_datetime(str(value))
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt_util.UTC)
    return parsed


@dataclass
class Household:
    id: int = 0
    name: str = ""
    share_code: str | None = None
    timezone_id: int | None = None
    created_at: object = None
    updated_at: object = None

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=_int(data.get("id"), 0),
            name=str(data.get("name") or ""),
            share_code=data.get("share_code"),
            timezone_id=_int(data.get("timezone_id")),
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
        )

    def thing_properties(self):
        return {"id": str(self.id), "name": self.name}


@dataclass
class Photo:
    id: int = 0
    location: str = ""

    @classmethod
    def from_dict(cls, data):
        data = data or {}
        return cls(id=_int(data.get("id"), 0), location=str(data.get("location") or ""))


@dataclass
class Tag:
    id: int = 0
    tag: str = ""

    @classmethod
    def from_dict(cls, data):
        data = data or {}
        return cls(id=_int(data.get("id"), 0), tag=str(data.get("tag") or ""))


@dataclass
class PetLocation:
    tag_id: int = 0
    device_id: int = 0
    where: int = PetLocationId.UNKNOWN
    since: object = None

    @classmethod
    def from_dict(cls, data):
        data = data or {}
        return cls(
            tag_id=_int(data.get("tag_id"), 0),
            device_id=_int(data.get("device_id"), 0),
            where=_int(data.get("where"), PetLocationId.UNKNOWN),
            since=parse_timestamp(data.get("since")),
        )

    @property
    def location(self):
        return PetLocationId.find_by_id(self.where)


@dataclass
class Pet:
    id: int = 0
    name: str = ""
    gender: int = 0
    comments: str = ""
    household_id: int = 0
    breed_id: int = 0
    photo_id: int = 0
    species_id: int = 0
    tag_id: int = 0
    weight: str = ""
    photo: Photo = field(default_factory=Photo)
    position: PetLocation = field(default_factory=PetLocation)
    tag: Tag = field(default_factory=Tag)

    @classmethod
    def from_dict(cls, data):
        position = data.get("position")
        if position is None:
            position = (data.get("status") or {}).get("activity")
        weight = data.get("weight")
        return cls(
            id=_int(data.get("id"), 0),
            name=str(data.get("name") or ""),
            gender=_int(data.get("gender"), PetGender.UNKNOWN),
            comments=str(data.get("comments") or ""),
            household_id=_int(data.get("household_id"), 0),
            breed_id=_int(data.get("breed_id"), 0),
            photo_id=_int(data.get("photo_id"), 0),
            species_id=_int(data.get("species_id"), 0),
            tag_id=_int(data.get("tag_id"), 0),
            weight="" if weight is None else str(weight),
            photo=Photo.from_dict(data.get("photo")),
            position=PetLocation.from_dict(position),
            tag=Tag.from_dict(data.get("tag")),
        )

    @property
    def gender_name(self):
        return PetGender.find_by_id(self.gender).label

    @property
    def species_name(self):
        return PetSpecies.find_by_id(self.species_id).label

    def thing_properties(self):
        return {
            "id": str(self.id),
            "name": self.name,
            "householdId": str(self.household_id),
        }


@dataclass
class Device:
    id: int = 0
    name: str = ""
    product_id: int = 0
    household_id: int = 0
    parent_device_id: int | None = None
    serial_number: str | None = None
    mac_address: str | None = None
    online: bool | None = None
    battery: float | None = None

    @classmethod
    def from_dict(cls, data):
        status = data.get("status") or {}
        battery = status.get("battery")
        try:
            battery = float(battery) if battery is not None else None
        except (TypeError, ValueError):
            battery = None
        online = status.get("online")
        return cls(
            id=_int(data.get("id"), 0),
            name=str(data.get("name") or ""),
            product_id=_int(data.get("product_id"), 0),
            household_id=_int(data.get("household_id"), 0),
            parent_device_id=_int(data.get("parent_device_id")),
            serial_number=data.get("serial_number"),
            mac_address=data.get("mac_address"),
            online=None if online is None else bool(online),
            battery=battery,
        )

    @property
    def product(self):
        return ProductId.find_by_id(self.product_id)

    @property
    def product_name(self):
        return self.product.name.replace("_", " ").title()


class SurePetcareTopology:
    """Households, pets and devices of the account, keyed by numeric id."""

    def __init__(self):
        self.households = []
        self.pets = []
        self.devices = []

    @classmethod
    def from_dict(cls, data):
        topology = cls()
        topology.households = [Household.from_dict(h) for h in data.get("households") or []]
        topology.pets = [Pet.from_dict(p) for p in data.get("pets") or []]
        topology.devices = [Device.from_dict(d) for d in data.get("devices") or []]
        return topology

    def replace(self, other):
        self.households = other.households
        self.pets = other.pets
        self.devices = other.devices

    @staticmethod
    def _by_id(objects, object_id):
        object_id = _int(object_id)
        for obj in objects:
            if obj.id == object_id:
                return obj
        return None

    def get_household(self, household_id):
        return self._by_id(self.households, household_id)

    def get_pet(self, pet_id):
        return self._by_id(self.pets, pet_id)

    def get_device(self, device_id):
        return self._by_id(self.devices, device_id)

    def find_pet(self, pet_id):
        pet = self.get_pet(pet_id)
        if pet is None:
            raise SurePetcareNotFoundError(KIND_PET, pet_id)
        return pet

    def objects(self):
        """Yield ``(kind, object)`` for every cached object."""
        for household in self.households:
            yield KIND_HOUSEHOLD, household
        for pet in self.pets:
            yield KIND_PET, pet
        for device in self.devices:
            yield KIND_DEVICE, device
