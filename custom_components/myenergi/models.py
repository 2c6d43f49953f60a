"""Data objects returned by the myenergi API and the topology cache."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
import logging

from homeassistant.util import dt as dt_util

from .const import DEVICE_EDDI, DEVICE_HARVI, DEVICE_ZAPPI
from .exceptions import MyEnergiDeviceNotFoundError

_LOGGER = logging.getLogger(__name__)

JOULES_PER_KWH = 3_600_000


class ZappiChargingMode(IntEnum):
    """Charging modes accepted by ``cgi-zappi-mode``."""

    BOOST = 0
    FAST = 1
    ECO = 2
    ECO_PLUS = 3
    STOP = 4


class ZappiBoostMode(IntEnum):
    """Boost sub-modes sent together with ``ZappiChargingMode.BOOST``."""

    STOP = 2
    MANUAL = 10
    SMART = 11


def _int(value):
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _float(value):
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _str(value):
    if value is None:
        return None
    return str(value)


@dataclass
class BaseSummary:
    """Fields shared by every device in a ``cgi-jstatus`` answer."""

    serial_number: str = ""
    date: str | None = None  # DD-MM-YYYY
    time: str | None = None  # HH:MM:SS
    dst: int | None = None
    firmware_version: str | None = None

    @classmethod
    def _base_kwargs(cls, data):
        return {
            "serial_number": str(data.get("sno", "")),
            "date": _str(data.get("dat")),
            "time": _str(data.get("tim")),
            "dst": _int(data.get("dst")),
            "firmware_version": _str(data.get("fwv")),
        }

    @classmethod
    def from_dict(cls, data):
        return cls(**cls._base_kwargs(data))

    @property
    def last_update_time(self):
        """Timestamp of the last report from the device, in UTC."""
        if not self.date or not self.time:
            return None
        try:
            parsed = datetime.strptime(f"{self.date} {self.time}", "%d-%m-%Y %H:%M:%S")
        except ValueError:
            _LOGGER.debug("Unparsable timestamp %s %s", self.date, self.time)
            return None
        return parsed.replace(tzinfo=dt_util.UTC)

    def thing_properties(self):
        return {
            "serialNumber": self.serial_number,
            "firmwareVersion": self.firmware_version,
        }


@dataclass
class ZappiSummary(BaseSummary):
    supply_voltage: float | None = None
    supply_frequency: float | None = None
    number_of_phases: int | None = None
    locking_mode: int | None = None
    charging_mode: int | None = None
    status: int | None = None
    plug_status: str | None = None
    command_tries: int | None = None
    diverter_priority: int | None = None
    minimum_green_level: int | None = None
    grid_power: int | None = None
    generated_power: int | None = None
    diverted_power: int | None = None
    charge_added: float | None = None
    smart_boost_hour: int | None = None
    smart_boost_minute: int | None = None
    smart_boost_charge: float | None = None
    timed_boost_hour: int | None = None
    timed_boost_minute: int | None = None
    timed_boost_charge: float | None = None
    clamp_names: list = field(default_factory=lambda: [None] * 6)
    clamp_powers: list = field(default_factory=lambda: [None] * 6)

    @classmethod
    def from_dict(cls, data):
        voltage = _float(data.get("vol"))
        return cls(
            **cls._base_kwargs(data),
            # reported in decivolts
            supply_voltage=voltage / 10 if voltage is not None else None,
            supply_frequency=_float(data.get("frq")),
            number_of_phases=_int(data.get("pha")),
            locking_mode=_int(data.get("lck")),
            charging_mode=_int(data.get("zmo")),
            status=_int(data.get("sta")),
            plug_status=_str(data.get("pst")),
            command_tries=_int(data.get("cmt")),
            diverter_priority=_int(data.get("pri")),
            minimum_green_level=_int(data.get("mgl")),
            grid_power=_int(data.get("grd")),
            generated_power=_int(data.get("gen")),
            diverted_power=_int(data.get("div")),
            charge_added=_float(data.get("che")),
            smart_boost_hour=_int(data.get("sbh")),
            smart_boost_minute=_int(data.get("sbm")),
            smart_boost_charge=_float(data.get("sbk")),
            timed_boost_hour=_int(data.get("tbh")),
            timed_boost_minute=_int(data.get("tbm")),
            timed_boost_charge=_float(data.get("tbk")),
            clamp_names=[_str(data.get(f"ectt{i}")) for i in range(1, 7)],
            clamp_powers=[_int(data.get(f"ectp{i}")) for i in range(1, 7)],
        )

    @staticmethod
    def _format_time(hour, minute):
        if hour is None and minute is None:
            return None
        return f"{hour or 0}:{minute or 0:02d}"

    @property
    def smart_boost_time(self):
        return self._format_time(self.smart_boost_hour, self.smart_boost_minute)

    @property
    def timed_boost_time(self):
        return self._format_time(self.timed_boost_hour, self.timed_boost_minute)


@dataclass
class HarviSummary(BaseSummary):
    clamp_names: list = field(default_factory=lambda: [None] * 3)
    clamp_powers: list = field(default_factory=lambda: [None] * 3)
    clamp_phases: list = field(default_factory=lambda: [None] * 3)

    @classmethod
    def from_dict(cls, data):
        return cls(
            **cls._base_kwargs(data),
            clamp_names=[_str(data.get(f"ectt{i}")) for i in range(1, 4)],
            clamp_powers=[_int(data.get(f"ectp{i}")) for i in range(1, 4)],
            clamp_phases=[_int(data.get(f"ect{i}p")) for i in range(1, 4)],
        )


@dataclass
class EddiSummary(BaseSummary):
    diverted_power: int | None = None
    status: int | None = None
    energy_transferred: float | None = None
    tank_temperature_1: float | None = None
    tank_temperature_2: float | None = None
    clamp_names: list = field(default_factory=lambda: [None] * 3)
    clamp_powers: list = field(default_factory=lambda: [None] * 3)

    @classmethod
    def from_dict(cls, data):
        return cls(
            **cls._base_kwargs(data),
            diverted_power=_int(data.get("div")),
            status=_int(data.get("sta")),
            energy_transferred=_float(data.get("che")),
            tank_temperature_1=_float(data.get("tp1")),
            tank_temperature_2=_float(data.get("tp2")),
            clamp_names=[_str(data.get(f"ectt{i}")) for i in range(1, 4)],
            clamp_powers=[_int(data.get(f"ectp{i}")) for i in range(1, 4)],
        )


@dataclass
class DeviceSummary:
    """One element of the ``cgi-jstatus-*`` list."""

    asn: str | None = None
    firmware_version: str | None = None
    zappis: list = field(default_factory=list)
    harvis: list = field(default_factory=list)
    eddis: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, data):
        return cls(
            asn=_str(data.get("asn")),
            firmware_version=_str(data.get("fwv")),
            zappis=[ZappiSummary.from_dict(d) for d in data.get(DEVICE_ZAPPI) or []],
            harvis=[HarviSummary.from_dict(d) for d in data.get(DEVICE_HARVI) or []],
            eddis=[EddiSummary.from_dict(d) for d in data.get(DEVICE_EDDI) or []],
        )


def parse_device_summary_list(payload):
    """Parse the JSON list answered by ``cgi-jstatus-*``."""
    if isinstance(payload, dict):
        payload = [payload]
    if not isinstance(payload, list):
        return []
    return [DeviceSummary.from_dict(item) for item in payload if isinstance(item, dict)]


class MyEnergiData:
    """In-memory snapshot of every device reported by the hub.

    Lists are appended to as-is: a serial number reported twice is stored
    twice and lookups return the first entry.
    """

    def __init__(self):
        self.asn = ""
        self.zappis = []
        self.harvis = []
        self.eddis = []

    def _devices_of(self, device_type):
        if device_type == DEVICE_ZAPPI:
            return self.zappis
        if device_type == DEVICE_HARVI:
            return self.harvis
        if device_type == DEVICE_EDDI:
            return self.eddis
        raise ValueError(f"Unknown device type: {device_type}")

    def add_zappi(self, device):
        self.zappis.append(device)

    def add_harvi(self, device):
        self.harvis.append(device)

    def add_eddi(self, device):
        self.eddis.append(device)

    def add_all_zappis(self, devices):
        self.zappis.extend(devices)

    def add_all_harvis(self, devices):
        self.harvis.extend(devices)

    def add_all_eddis(self, devices):
        self.eddis.extend(devices)

    def merge(self, summary):
        """Append the devices of one ``DeviceSummary``."""
        if summary.asn is not None:
            self.asn = summary.asn
        self.add_all_harvis(summary.harvis)
        self.add_all_zappis(summary.zappis)
        self.add_all_eddis(summary.eddis)

    def clear(self):
        self.asn = ""
        self.zappis = []
        self.harvis = []
        self.eddis = []

    @staticmethod
    def _by_serial(devices, serial_number):
        for device in devices:
            if device.serial_number == serial_number:
                return device
        return None

    def get_zappi_by_serial_number(self, serial_number):
        return self._by_serial(self.zappis, serial_number)

    def get_harvi_by_serial_number(self, serial_number):
        return self._by_serial(self.harvis, serial_number)

    def get_eddi_by_serial_number(self, serial_number):
        return self._by_serial(self.eddis, serial_number)

    def get_device(self, device_type, serial_number):
        return self._by_serial(self._devices_of(device_type), serial_number)

    def find_device(self, serial_number):
        """Return the device with ``serial_number`` or raise."""
        for device_type in (DEVICE_ZAPPI, DEVICE_HARVI, DEVICE_EDDI):
            device = self.get_device(device_type, serial_number)
            if device is not None:
                return device
        raise MyEnergiDeviceNotFoundError(serial_number)

    def devices(self):
        """Yield ``(device_type, summary)`` for every cached device."""
        for device_type in (DEVICE_ZAPPI, DEVICE_HARVI, DEVICE_EDDI):
            for device in self._devices_of(device_type):
                yield device_type, device

    def __len__(self):
        return len(self.zappis) + len(self.harvis) + len(self.eddis)


@dataclass
class CommandStatus:
    status: int = 0
    status_text: str = ""
    asn: str | None = None

    @classmethod
    def from_dict(cls, data):
        return cls(
            status=_int(data.get("status")) or 0,
            status_text=str(data.get("statustext", "")),
            asn=_str(data.get("asn")),
        )


@dataclass
class ZappiHistoryEntry:
    """One hour (or minute) of Zappi history. Energy values are joules."""

    year: int | None = None
    month: int | None = None
    day: int | None = None
    day_of_week: str | None = None
    hour: int = 0
    minute: int = 0
    imported: int = 0
    exported: int = 0
    generated: int = 0
    diverted: int = 0

    @classmethod
    def from_dict(cls, data):
        return cls(
            year=_int(data.get("yr")),
            month=_int(data.get("mon")),
            day=_int(data.get("dom")),
            day_of_week=_str(data.get("dow")),
            hour=_int(data.get("hr")) or 0,
            minute=_int(data.get("min")) or 0,
            imported=_int(data.get("imp")) or 0,
            exported=_int(data.get("exp")) or 0,
            generated=_int(data.get("gep")) or 0,
            diverted=sum(_int(data.get(f"h{i}d")) or 0 for i in range(1, 4)),
        )

    def as_dict(self):
        return {
            "date": f"{self.year:04d}-{self.month:02d}-{self.day:02d}"
            if self.year and self.month and self.day
            else None,
            "hour": self.hour,
            "minute": self.minute,
            "imported": self.imported,
            "exported": self.exported,
            "generated": self.generated,
            "diverted": self.diverted,
        }


@dataclass
class ZappiHistory:
    """History answer of the form ``{"U<serial>": [entries...]}``."""

    id: str = ""
    entries: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict) or not data:
            raise ValueError("Empty history response")
        key, values = next(iter(data.items()))
        if not isinstance(values, list):
            raise ValueError(f"Unexpected history payload for {key}")
        return cls(id=key, entries=[ZappiHistoryEntry.from_dict(v) for v in values])

    @property
    def serial_number(self):
        return self.id[1:] if self.id[:1] in ("U", "Z") else self.id

    def total_imported_kwh(self):
        return sum(entry.imported for entry in self.entries) / JOULES_PER_KWH

    def total_diverted_kwh(self):
        return sum(entry.diverted for entry in self.entries) / JOULES_PER_KWH
