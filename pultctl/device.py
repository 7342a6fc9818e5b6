"""Device configuration files, settings paths and the console event log."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from pultctl.constants import (
    IMM_OP_1_ADDR,
    IMM_OP_2_ADDR,
    IMM_RS485_1_ADDR,
    IMM_RS485_2_ADDR,
    IMM_RS485_3_ADDR,
)

MAS_SLOTS = 10
BLK_SLOTS = 4

RESULT_OK = "Ok"
RESULT_ERROR = "Ошибка"


def device_ini_path(app_dir, device):
    """Return the path of the settings file of device number ``device``."""
    return Path(app_dir) / f"Dev{device}" / "device.ini"


def ustavki_path(app_dir, device, ust):
    """Return the path of settings set ``ust`` of device number ``device``."""
    if ust < 0:
        raise ValueError(f"invalid settings index: {ust}")
    return Path(app_dir) / f"Dev{device}" / f"Ust{ust}.ini"


def imm_addresses(mas485):
    """Return the Modbus address of the simulator serving each MAS slot.

    RS-485 consoles serve ten MAS, optical ones serve eight.
    """
    if mas485:
        return (
            (IMM_RS485_1_ADDR,) * 4
            + (IMM_RS485_2_ADDR,) * 4
            + (IMM_RS485_3_ADDR,) * 2
        )
    return (IMM_OP_1_ADDR,) * 4 + (IMM_OP_2_ADDR,) * 4


def load_device_list(settings):
    """Return the device names and the index of the last selected device."""
    names = [entry.value("DevName", "") for entry in settings.read_array("Device")]
    selected = settings.value("LastState/Device", 0)
    return names, selected


@dataclass
class DeviceConfig:
    """Configuration of one tested device."""

    name: str = ""
    mas485_op: bool = False
    mas_number: int = 0
    mas_enable: list = field(default_factory=lambda: [False] * MAS_SLOTS)
    mas_name: list = field(
        default_factory=lambda: [f"MAC{i}" for i in range(MAS_SLOTS)]
    )
    dmas2_enable: bool = False
    dmas2_name: str = ""
    dmas6_enable: bool = False
    dmas6_name: str = ""
    pzu_enable: bool = False
    blk_number: int = 0
    blk_enable: list = field(default_factory=lambda: [False] * BLK_SLOTS)
    blk_name: list = field(
        default_factory=lambda: [f"БЛК{i}" for i in range(BLK_SLOTS)]
    )
    kadr_type: int = 0
    kadr_input_type: bool = True
    ustavki: list = field(default_factory=list)


def load_device_config(settings):
    """Read a device settings file into a :class:`DeviceConfig`."""
    config = DeviceConfig()
    config.ustavki = [
        entry.value("ust_Name", "error") for entry in settings.read_array("Ustavki")
    ]

    config.mas_number = settings.array_size("MAS")
    config.mas_enable = [
        settings.value(f"MAS/{i + 1}/Enable", False) for i in range(MAS_SLOTS)
    ]
    config.mas_name = [
        settings.value(f"MAS/{i + 1}/Name", "NoMAC") for i in range(MAS_SLOTS)
    ]

    config.blk_number = settings.array_size("BLK")
    config.blk_enable = [
        settings.value(f"BLK/{i + 1}/Enable", False) for i in range(BLK_SLOTS)
    ]
    config.blk_name = [
        settings.value(f"BLK/{i + 1}/Name", "NoBLK") for i in range(BLK_SLOTS)
    ]

    config.dmas2_enable = settings.value("DMAS2_Enable", False)
    config.dmas2_name = settings.value("DMAS2_Name", "No DM")
    config.dmas6_enable = settings.value("DMAS6_Enable", False)
    config.dmas6_name = settings.value("DMAS6_Name", "No DM")

    config.mas485_op = settings.value("MAS485_OP", False)
    config.kadr_type = settings.value("KadrType", 0) & 0xFF
    config.kadr_input_type = settings.value("KadrInputType", True)
    return config


@dataclass
class _LogRow:
    time: str
    text: str
    result: str = ""


@dataclass
class EventLog:
    """Table of events with a time, a description and an optional result."""

    clock: Callable[[], datetime] = datetime.now
    rows: list = field(default_factory=list)
    result_row: Optional[int] = None

    def add(self, text, wait_for_result):
        """Append an event; with ``wait_for_result`` it receives the next result."""
        self.rows.append(_LogRow(self.clock().strftime("%H:%M:%S"), text))
        if wait_for_result:
            self.result_row = len(self.rows) - 1
        return self.rows[-1]

    def log_result(self, result):
        """Record the outcome of the event that waits for a result."""
        if self.result_row is None:
            raise LookupError("no event is waiting for a result")
        self.rows[self.result_row].result = RESULT_OK if result else RESULT_ERROR

    def clear(self):
        self.rows.clear()
        self.result_row = None