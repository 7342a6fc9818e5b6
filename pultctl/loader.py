"""Loading a settings set (ustavki) into the console's simulators."""

from __future__ import annotations

import contextlib
import logging
from dataclasses import dataclass, field
from typing import Optional

from pultctl.commands import ModbusError
from pultctl.constants import IMM_DMAS_ADDR
from pultctl.device import imm_addresses

logger = logging.getLogger(__name__)

LK_PER_MAS = 4
SENSORS_PER_BLK = 24
_RS485_MAS = 10
_OPTICAL_MAS = 8
_RS485_BLK = 4

_DEFAULT_DURATION = 10
_DEFAULT_BUFFER_SIZE = 64
_DEFAULT_CONST_POS = 200


class UstavkiLoadError(Exception):
    """Loading a settings set failed; names the unit that failed."""

    def __init__(self, mas=None, dm2=False, dm6=False, blk=None):
        self.mas = mas
        self.dm2 = dm2
        self.dm6 = dm6
        self.blk = blk
        if mas is not None:
            unit = f"MAS{mas}"
        elif dm2:
            unit = "DM2"
        elif dm6:
            unit = "DM6"
        elif blk is not None:
            unit = f"BLK{blk + 1}"
        else:
            unit = "console"
        super().__init__(f"error loading settings into {unit}")


@dataclass
class LoadReport:
    """Units that were loaded successfully."""

    mas: list = field(default_factory=list)
    dmas2: bool = False
    dmas6: bool = False
    blk: list = field(default_factory=list)


class UstavkiLoader:
    """Writes MAS, DM and BLK settings from a settings file to the console."""

    def __init__(self, console, config, log):
        self.console = console
        self.config = config
        self.log = log

    def _fail(self, cause, **unit):
        self.log.log_result(False)
        raise UstavkiLoadError(**unit) from cause

    def load(self, settings):
        """Load ``settings`` into the console and return a :class:`LoadReport`.

        Raises UstavkiLoadError when a Modbus transaction fails.
        """
        config = self.config
        report = LoadReport()
        self.log.add("Начало загрузки уставок", False)

        if config.mas485_op:
            max_mas, max_blk = _RS485_MAS, _RS485_BLK
        else:
            max_mas, max_blk = _OPTICAL_MAS, 0
        addresses = imm_addresses(config.mas485_op)

        for mas in range(max_mas):
            if not config.mas_enable[mas]:
                continue
            try:
                self._load_mas(settings, mas, addresses[mas])
            except ModbusError as exc:
                self._fail(exc, mas=mas)
            report.mas.append(mas)

        if config.dmas2_enable:
            self._load_dm(settings, "DMAS2", self.console.load_dmas2, "Загрузка ЦМ2", dm2=True)
            report.dmas2 = True

        if config.dmas6_enable:
            self._load_dm(settings, "DMAS6", self.console.load_dmas6, "Загрузка ЦМ6", dm6=True)
            report.dmas6 = True

        if max_blk:
            self._switch_blk(False, False, False, False)
            for blk in range(max_blk):
                if not config.blk_enable[blk]:
                    continue
                try:
                    self._load_blk(settings, blk)
                except ModbusError as exc:
                    self._fail(exc, blk=blk)
                report.blk.append(blk)
            self._switch_blk(*config.blk_enable[:_RS485_BLK])

        return report

    def _switch_blk(self, *states):
        # The result of switching BLK units is not checked.
        with contextlib.suppress(ModbusError):
            self.console.on_off_blk(*states)

    def _load_mas(self, settings, mas, imm_addr):
        console = self.console
        name = self.config.mas_name[mas]
        for lk in range(LK_PER_MAS):
            base = f"MAS/{mas + 1}/LK/{lk + 1}"
            self.log.add(f"Загрузка {name} ЛК{lk + 1}", True)
            console.load_mas_lk_number(imm_addr, mas % 4, lk)

            duration = settings.value(f"{base}/Duration", _DEFAULT_DURATION)
            self.log.add(f"Установка задержки в {duration}", True)
            console.load_duration(imm_addr, duration)

            size = settings.value(f"{base}/BufferSize", _DEFAULT_BUFFER_SIZE)
            size = min(size, settings.array_size(f"{base}/Buffer"))
            self.log.add(f"Загрузка буфера размер: {size}", True)
            buffer = bytes(
                settings.value(f"{base}/Buffer/{i + 1}/Buf", 0) & 0xFF
                for i in range(size)
            )
            console.load_lk_buffer(imm_addr, buffer)
            self.log.log_result(True)

            addr = settings.value(f"{base}/Addr", 0)
            self.log.add(f"Установка адреса в {addr}", True)
            console.load_lk_addr(imm_addr, addr)
            self.log.log_result(True)

            adder = settings.value(f"{base}/Adder", 0)
            self.log.add(f"Установка сумматора в {adder}", True)
            console.load_lk_adder(imm_addr, adder)
            self.log.log_result(True)

            if lk in (0, 1):
                pos = settings.value(f"{base}/Const1Pos", _DEFAULT_CONST_POS)
                value = settings.value(f"{base}/Const1", 0)
                self.log.add(
                    f"Установка константы1 значение {value} в канале {pos}", True
                )
                console.load_lk_const1(imm_addr, pos, value)
                self.log.log_result(True)

                pos = settings.value(f"{base}/Const2Pos", _DEFAULT_CONST_POS)
                value = settings.value(f"{base}/Const2", 0)
                self.log.add(
                    f"Установка константы2 значение {value} в канале {pos}", True
                )
                console.load_lk_const2(imm_addr, pos, value)
                self.log.log_result(True)

    def _load_dm(self, settings, key, command, title, **unit):
        start = settings.value(f"DMAS/{key}_Start", 0)
        stop = settings.value(f"DMAS/{key}_Stop", 0)
        increment = settings.value(f"DMAS/{key}_INCREMENT", 0)
        delay = settings.value(f"DMAS/{key}_DELAY", 0)
        self.log.add(title, True)
        try:
            command(IMM_DMAS_ADDR, start, stop, increment, delay)
        except ModbusError as exc:
            self._fail(exc, **unit)
        self.log.log_result(True)

    def _load_blk(self, settings, blk):
        self.log.add(f"Загрузка БЛК{blk + 1}", True)
        self.console.select_blk(blk)
        for sensor in range(SENSORS_PER_BLK):
            base = f"BLK/{blk + 1}/Sensor/{sensor + 1}"
            self.log.add(f"Загрузка датчика{sensor + 1}", True)
            self.console.add_sensor_blk(
                settings.value(f"{base}/Freq", 0),
                sensor,
                settings.value(f"{base}/Type", 0),
                settings.value(f"{base}/Param_A", 0),
                settings.value(f"{base}/Param_B", 0),
                settings.value(f"{base}/Param_C", 0),
            )


def describe_failure(error: UstavkiLoadError) -> Optional[str]:
    """Return a short name of the unit that failed."""
    return str(error)