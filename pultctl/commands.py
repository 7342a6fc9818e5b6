"""Register-level commands sent to the TK170 console over Modbus."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Protocol, Sequence

from pultctl.constants import (
    ADDER_ADDR,
    ADDR_LK_ADDR,
    BLK_ON_OFF_ADDR,
    BLK_SELECT_ADDR,
    BLK_SENSOR_SET_ADDR,
    BU_ADDR,
    BU_KADR_TYPE_ADDR,
    BUFFER2_ADDR_OP,
    BUFFER2_ADDR_RS,
    BUFFER_ADDR_OP,
    BUFFER_ADDR_RS,
    BUFFER_SIZE_ADDR,
    CONST1_ADDR,
    CONST2_ADDR,
    DMAS2_DELAY_ADDR,
    DMAS2_ENABLE_ADDR,
    DMAS2_START_ADDR,
    DMAS6_DELAY_ADDR,
    DMAS6_ENABLE_ADDR,
    DMAS6_START_ADDR,
    DURATION_ADDR,
    IMM_BLK_ADDR,
    IMM_DMAS_ADDR,
    IMM_OP_1_ADDR,
    IMM_OP_2_ADDR,
    IMM_PZU_ADDR,
    INPUT_SWITCH_ADDR,
    KADR_TYPE_OFF,
    LK_NUMBER_ADDR,
    MAS_NUMBER_ADDR,
    REGIME_ADDR,
    SF_ADDR_ADDR,
    SF_INF1_ADDR,
    SF_INF2_ADDR,
    KadrType,
    kadr_type_code,
)

logger = logging.getLogger(__name__)

# Input switch settings of the PK-ICM simulator
INPUT_SWITCH_RTSC = 0xFF00
INPUT_SWITCH_ELECTRIC = 0xFF01
INPUT_SWITCH_OPTIC = 0xFF02

# ROM simulator control words
PZU_WRITE_COMMAND = 0x0100
PZU_START = 0x0002
PZU_STOP = 0x0001
PZU_ON = 0x0200
PZU_OFF = 0x0100

_FIRST_BUFFER_WORDS = 32
_PZU_PACKET_WORDS = 16
_ST_BUFFER_SIZE = 16
_NO_CONST_POS = 255


class ModbusError(Exception):
    """A Modbus transaction with the console failed."""

    def __init__(self, code, message=None):
        self.code = code
        super().__init__(message or f"Modbus error {code}")


class ModbusClient(Protocol):
    """Transport used by :class:`Console`; failures raise :class:`ModbusError`."""

    def write_holding_register(self, slave: int, address: int, value: int) -> None:
        """Write one holding register."""

    def write_multiple_holding_registers(
        self, slave: int, address: int, values: Sequence[int]
    ) -> None:
        """Write consecutive holding registers starting at ``address``."""

    def write_coil(self, slave: int, address: int, value: bool) -> None:
        """Write one coil."""

    def write_multiple_coils(
        self, slave: int, address: int, values: Sequence[bool]
    ) -> None:
        """Write consecutive coils starting at ``address``."""

    def read_input_registers(self, slave: int, address: int, count: int) -> Sequence[int]:
        """Read ``count`` input registers starting at ``address``."""


def _pack_words(data: bytes) -> list[int]:
    """Pack byte pairs into little-endian 16-bit words; a trailing odd byte is dropped."""
    return [low | (high << 8) for low, high in zip(data[0::2], data[1::2])]


def _swap16(value: int) -> int:
    value &= 0xFFFF
    return ((value << 8) & 0xFF00) | (value >> 8)


def _pair(high: int, low: int) -> int:
    return ((high & 0xFF) << 8) | (low & 0xFF)


class Console:
    """High-level operations on the console's simulators."""

    def __init__(self, client):
        self.client = client

    def _write(self, slave: int, address: int, value: int) -> None:
        self.client.write_holding_register(slave, address, value & 0xFFFF)

    def load_mas_lk_number(self, imm_addr, mas_number, lk_number):
        """Select the MAS and link channel that following writes apply to."""
        logger.debug("Set imm: %s MAS number: %s LK number: %s", imm_addr, mas_number, lk_number)
        self._write(imm_addr, MAS_NUMBER_ADDR, mas_number)
        self._write(imm_addr, LK_NUMBER_ADDR, lk_number)

    def load_lk_addr(self, imm_addr, lk_addr):
        logger.debug("Imm: %s Load addr: %s", imm_addr, lk_addr)
        self._write(imm_addr, ADDR_LK_ADDR, lk_addr)

    def load_lk_buffer(self, imm_addr, buffer):
        """Write the link-channel buffer size and contents."""
        buffer = bytes(buffer)
        logger.debug("Imm: %s Load buffer size: %s", imm_addr, len(buffer))
        self._write(imm_addr, BUFFER_SIZE_ADDR, len(buffer) - 1)

        optical = imm_addr in (IMM_OP_1_ADDR, IMM_OP_2_ADDR)
        first_addr = BUFFER_ADDR_OP if optical else BUFFER_ADDR_RS
        second_addr = BUFFER2_ADDR_OP if optical else BUFFER2_ADDR_RS

        words = _pack_words(buffer)
        self.client.write_multiple_holding_registers(
            imm_addr, first_addr, words[:_FIRST_BUFFER_WORDS]
        )
        if len(buffer) > 2 * _FIRST_BUFFER_WORDS:
            self.client.write_multiple_holding_registers(
                imm_addr, second_addr, words[_FIRST_BUFFER_WORDS:]
            )

    def load_lk_adder(self, imm_addr, adder):
        logger.debug("Imm: %s Load adder: %s", imm_addr, adder)
        self._write(imm_addr, ADDER_ADDR, adder)

    def load_lk_const1(self, imm_addr, pos, value):
        """Place constant ``value`` at channel ``pos`` (first constant)."""
        logger.debug("Imm: %s Load const1: %s at pos: %s", imm_addr, value, pos)
        self._write(imm_addr, CONST1_ADDR, (pos << 8) | value)

    def load_lk_const2(self, imm_addr, pos, value):
        """Place constant ``value`` at channel ``pos`` (second constant)."""
        logger.debug("Imm: %s Load const2: %s at pos: %s", imm_addr, value, pos)
        self._write(imm_addr, CONST2_ADDR, (pos << 8) | value)

    def load_duration(self, imm_addr, duration):
        logger.debug("Imm: %s Load duration: %s", imm_addr, duration)
        self._write(imm_addr, DURATION_ADDR, duration)

    def _load_dmas(self, imm_addr, start_addr, delay_addr, enable_addr,
                   start, stop, increment, delay):
        self.client.write_multiple_holding_registers(
            imm_addr, start_addr, [_swap16(start), _swap16(stop), _swap16(increment)]
        )
        self._write(imm_addr, delay_addr, delay)
        self.client.write_coil(imm_addr, enable_addr, True)

    def load_dmas2(self, imm_addr, start, stop, increment, delay):
        """Configure and enable the DM2 ramp generator."""
        logger.debug("DMAS2 Imm: %s start %s stop %s inc %s delay %s",
                     imm_addr, start, stop, increment, delay)
        self._load_dmas(imm_addr, DMAS2_START_ADDR, DMAS2_DELAY_ADDR, DMAS2_ENABLE_ADDR,
                        start, stop, increment, delay)

    def load_dmas6(self, imm_addr, start, stop, increment, delay):
        """Configure and enable the DM6 ramp generator."""
        logger.debug("DMAS6 Imm: %s start %s stop %s inc %s delay %s",
                     imm_addr, start, stop, increment, delay)
        self._load_dmas(imm_addr, DMAS6_START_ADDR, DMAS6_DELAY_ADDR, DMAS6_ENABLE_ADDR,
                        start, stop, increment, delay)

    def on_off_blk(self, blk1, blk2, blk3, blk4):
        """Switch the four BLK units; coils are ordered BLK4 first."""
        logger.debug("On/Off BLK: %s %s %s %s", blk1, blk2, blk3, blk4)
        self.client.write_multiple_coils(
            IMM_BLK_ADDR, BLK_ON_OFF_ADDR, [bool(blk4), bool(blk3), bool(blk2), bool(blk1)]
        )

    def select_blk(self, blk_num):
        logger.debug("Select BLK%s", blk_num + 1)
        self._write(IMM_BLK_ADDR, BLK_SELECT_ADDR, 0xFF00 | (blk_num & 0xFF))

    def add_sensor_blk(self, freq, sensor_num, sensor_type, a, b, c):
        """Configure one sensor of the selected BLK unit."""
        logger.debug("Add sensor %s freq %s type %s a=%s b=%s c=%s",
                     sensor_num, freq, sensor_type, a, b, c)
        self.client.write_multiple_holding_registers(
            IMM_BLK_ADDR,
            BLK_SENSOR_SET_ADDR,
            [_pair(sensor_num, freq), _pair(a, sensor_type), _pair(c, b)],
        )

    def select_kadr_type(self, kadr_type, input_type):
        """Set the receiver frame type and route its input; 255 switches it off."""
        if kadr_type == KADR_TYPE_OFF:
            self._write(BU_ADDR, BU_KADR_TYPE_ADDR, 0)
            return
        code = kadr_type_code(kadr_type)
        logger.debug("Select KadrType %s set: %s", kadr_type, code)
        self._write(BU_ADDR, BU_KADR_TYPE_ADDR, code)

        kind = KadrType(kadr_type)
        if kind is KadrType.RTSC:
            switch = INPUT_SWITCH_RTSC
        elif kind in (KadrType.RTSCM, KadrType.RTSCM1):
            switch = INPUT_SWITCH_OPTIC if input_type else INPUT_SWITCH_ELECTRIC
        else:
            switch = INPUT_SWITCH_OPTIC
        self._write(IMM_DMAS_ADDR, INPUT_SWITCH_ADDR, switch)

    def set_regime_mas(self, slave, regime):
        logger.debug("Set MAS regime: %s %s", slave, regime)
        self._write(slave, REGIME_ADDR, regime)

    def load_imm_mas_data(self, slave, addr, data1, data2, data3, data4):
        """Load the self-test address and four data bytes into a MAS simulator."""
        self._write(slave, SF_ADDR_ADDR, addr & 0xFF)
        self._write(slave, SF_INF1_ADDR, _pair(data1, data2))
        self._write(slave, SF_INF2_ADDR, _pair(data3, data4))

    def load_st_mas_data(self, slave, addr, data1, data2, data3, data4):
        """Fill LK1 of each of the four MAS of ``slave`` with a constant byte."""
        for mas_number, fill in enumerate((data1, data2, data3, data4)):
            self.load_mas_lk_number(slave, mas_number, 0)
            self.load_lk_addr(slave, addr)
            self.load_lk_adder(slave, 0)
            self.load_lk_const1(slave, _NO_CONST_POS, 0)
            self.load_lk_const2(slave, _NO_CONST_POS, 0)
            self.load_lk_buffer(slave, bytes([fill & 0xFF]) * _ST_BUFFER_SIZE)

    def fpga_loaded(self):
        """Return True once the control unit reports a loaded frame type."""
        values = self.client.read_input_registers(BU_ADDR, BU_KADR_TYPE_ADDR, 1)
        return values[0] != 0

    def load_pzu(self, data, pause=0, interleaving=False, progress=None):
        """Write a ROM image into the ROM simulator in 16-word packets.

        With ``interleaving`` every data packet is followed by a packet of
        zeros. ``pause`` is a delay in milliseconds after each packet;
        ``progress`` is called with the byte offset of each data packet.
        """
        data = bytes(data)
        if 0 < len(data) < 2:
            raise ValueError("ROM image must hold at least one 16-bit word")
        packet_words = _PZU_PACKET_WORDS if len(data) >= 2 * _PZU_PACKET_WORDS else len(data) // 2
        packet_bytes = packet_words * 2

        position = 0
        sent_data = False
        while position < len(data):
            if interleaving and sent_data:
                sent_data = False
                payload = [0] * _PZU_PACKET_WORDS
            else:
                sent_data = True
                if progress is not None:
                    progress(position)
                chunk = data[position:position + packet_bytes].ljust(packet_bytes, b"\0")
                payload = _pack_words(chunk)

            self.client.write_multiple_holding_registers(
                IMM_PZU_ADDR, 0, [PZU_WRITE_COMMAND, *payload]
            )
            if sent_data:
                position += packet_bytes
            if pause > 0:
                time.sleep(pause / 1000)

    def start_pzu(self, status):
        self._write(IMM_PZU_ADDR, 0, PZU_START if status else PZU_STOP)

    def on_off_pzu(self, status):
        word = PZU_ON if status else PZU_OFF
        self.client.write_multiple_holding_registers(IMM_PZU_ADDR, 0, [word, word])

    def set_receiver(self, kadr_type, input_type):
        """Set the receiver frame type directly; input 0 optic, 1 electric, other RTSC."""
        self._write(BU_ADDR, BU_KADR_TYPE_ADDR, kadr_type)
        if input_type == 0:
            switch = INPUT_SWITCH_OPTIC
        elif input_type == 1:
            switch = INPUT_SWITCH_ELECTRIC
        else:
            switch = INPUT_SWITCH_RTSC
        self._write(IMM_DMAS_ADDR, INPUT_SWITCH_ADDR, switch)


ProgressCallback = Optional[Callable[[int], None]]