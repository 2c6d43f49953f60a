"""Tests for myenergi data objects and the topology cache."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from custom_components.myenergi.exceptions import MyEnergiDeviceNotFoundError
from custom_components.myenergi.models import (
    CommandStatus,
    DeviceSummary,
    HarviSummary,
    MyEnergiData,
    ZappiHistory,
    ZappiSummary,
    parse_device_summary_list,
)


class TestDeviceSummaryList:
    """Test parsing of the cgi-jstatus-* answer."""

    def test_parse(self, jstatus_payload) -> None:
        summaries = parse_device_summary_list(jstatus_payload)

        assert len(summaries) == 4
        assert summaries[0].eddis[0].serial_number == "20011111"
        assert summaries[1].zappis[0].serial_number == "16099999"
        assert summaries[2].harvis[0].serial_number == "10422222"
        assert summaries[3].asn == "s18.myenergi.net"

    def test_not_a_list(self) -> None:
        assert parse_device_summary_list("nonsense") == []

    def test_zappi_fields(self, jstatus_payload) -> None:
        zappi = parse_device_summary_list(jstatus_payload)[1].zappis[0]

        assert zappi.supply_voltage == pytest.approx(238.4)
        assert zappi.supply_frequency == pytest.approx(50.02)
        assert zappi.charging_mode == 3
        assert zappi.plug_status == "B2"
        assert zappi.grid_power == -1200
        assert zappi.diverted_power is None
        assert zappi.charge_added == pytest.approx(12.34)
        assert zappi.smart_boost_time == "14:05"
        assert zappi.timed_boost_time is None
        assert zappi.clamp_names[:2] == ["Internal Load", "Grid"]
        assert zappi.clamp_powers[1] == -1200
        assert zappi.clamp_powers[5] is None

    def test_harvi_fields(self, jstatus_payload) -> None:
        harvi = parse_device_summary_list(jstatus_payload)[2].harvis[0]

        assert harvi.clamp_names == ["Generation", "None", None]
        assert harvi.clamp_powers == [2100, None, None]
        assert harvi.clamp_phases == [1, 1, None]

    def test_last_update_time(self) -> None:
        zappi = ZappiSummary.from_dict({"sno": 1, "dat": "01-12-2020", "tim": "10:15:03"})

        assert zappi.last_update_time == datetime(2020, 12, 1, 10, 15, 3, tzinfo=timezone.utc)

    def test_last_update_time_unparsable(self) -> None:
        zappi = ZappiSummary.from_dict({"sno": 1, "dat": "2020/12/01", "tim": "x"})

        assert zappi.last_update_time is None

    def test_thing_properties(self) -> None:
        harvi = HarviSummary.from_dict({"sno": 7, "fwv": "3170S0.000"})

        assert harvi.thing_properties() == {
            "serialNumber": "7",
            "firmwareVersion": "3170S0.000",
        }


class TestMyEnergiData:
    """Test the topology cache."""

    def _summary(self, *serials: str) -> DeviceSummary:
        return DeviceSummary(
            asn="s1.myenergi.net",
            zappis=[ZappiSummary(serial_number=serial) for serial in serials],
        )

    def test_merge_appends_without_deduplication(self) -> None:
        data = MyEnergiData()

        data.merge(self._summary("1", "2"))
        data.merge(self._summary("2"))

        assert [z.serial_number for z in data.zappis] == ["1", "2", "2"]
        assert data.asn == "s1.myenergi.net"

    def test_lookup_returns_first_match(self) -> None:
        data = MyEnergiData()
        first = ZappiSummary(serial_number="5", charging_mode=1)
        data.add_zappi(first)
        data.add_zappi(ZappiSummary(serial_number="5", charging_mode=2))

        assert data.get_zappi_by_serial_number("5") is first

    def test_lookup_unknown(self) -> None:
        data = MyEnergiData()
        data.merge(self._summary("1"))

        assert data.get_zappi_by_serial_number("9") is None
        assert data.get_harvi_by_serial_number("1") is None
        assert data.get_eddi_by_serial_number("1") is None

    def test_find_device_not_found(self) -> None:
        data = MyEnergiData()

        with pytest.raises(MyEnergiDeviceNotFoundError) as excinfo:
            data.find_device("404")

        assert excinfo.value.serial_number == "404"

    def test_find_device_any_type(self) -> None:
        data = MyEnergiData()
        harvi = HarviSummary(serial_number="3")
        data.add_all_harvis([harvi])

        assert data.find_device("3") is harvi

    def test_clear(self, jstatus_payload) -> None:
        data = MyEnergiData()
        for summary in parse_device_summary_list(jstatus_payload):
            data.merge(summary)
        assert len(data) == 3

        data.clear()

        assert len(data) == 0
        assert data.asn == ""

    def test_devices(self, jstatus_payload) -> None:
        data = MyEnergiData()
        for summary in parse_device_summary_list(jstatus_payload):
            data.merge(summary)

        assert [(kind, d.serial_number) for kind, d in data.devices()] == [
            ("zappi", "16099999"),
            ("harvi", "10422222"),
            ("eddi", "20011111"),
        ]

    def test_unknown_device_type(self) -> None:
        with pytest.raises(ValueError):
            MyEnergiData().get_device("libbi", "1")


class TestCommandAndHistory:
    """Test command status and history payloads."""

    def test_command_status(self) -> None:
        status = CommandStatus.from_dict({"status": -14, "statustext": "", "asn": "s18"})

        assert status.status == -14
        assert status.asn == "s18"

    def test_hourly_history(self) -> None:
        history = ZappiHistory.from_dict(
            {
                "U16099999": [
                    {"dow": "Sat", "dom": 28, "mon": 11, "yr": 2020, "imp": 1800000},
                    {"hr": 1, "dow": "Sat", "dom": 28, "mon": 11, "yr": 2020, "imp": 1800000, "h1d": 360000},
                ]
            }
        )

        assert history.id == "U16099999"
        assert history.serial_number == "16099999"
        assert [entry.hour for entry in history.entries] == [0, 1]
        assert history.total_imported_kwh() == pytest.approx(1.0)
        assert history.total_diverted_kwh() == pytest.approx(0.1)
        assert history.entries[1].as_dict()["date"] == "2020-11-28"

    def test_empty_history(self) -> None:
        with pytest.raises(ValueError):
            ZappiHistory.from_dict({})
