"""Bus addresses, register maps and enumerations of the TK170 console."""

from __future__ import annotations

from enum import IntEnum

APP_NAME = "pult"

# Simulator addresses on the Modbus bus
BU_ADDR = 1
IMM_DMAS_ADDR = 44
IMM_RS485_1_ADDR = 60
IMM_RS485_2_ADDR = 64
IMM_RS485_3_ADDR = 62
IMM_OP_1_ADDR = 70
IMM_OP_2_ADDR = 71
IMM_BLK_ADDR = 10
IMM_PZU_ADDR = 101

# PK-ICM (digital MAS) registers
DMAS2_START_ADDR = 1
DMAS6_START_ADDR = 4
DMAS2_DELAY_ADDR = 7
DMAS6_DELAY_ADDR = 8
DMAS2_ENABLE_ADDR = 1
DMAS6_ENABLE_ADDR = 2
INPUT_SWITCH_ADDR = 9

# MAS simulator registers
MAS_NUMBER_ADDR = 1
LK_NUMBER_ADDR = 2
ADDR_LK_ADDR = 3
BUFFER_SIZE_ADDR = 4
ADDER_ADDR = 5
CONST1_ADDR = 6
CONST2_ADDR = 7
DURATION_ADDR = 8
REGIME_ADDR = 9
SF_ADDR_ADDR = 10
SF_INF1_ADDR = 11
SF_INF2_ADDR = 12
SF_MAC1_RESULT = 13
SF_MAC2_RESULT = 14
SF_MAC3_RESULT = 15
SF_MAC4_RESULT = 16
BUFFER_ADDR_OP = 17
BUFFER2_ADDR_OP = 18
BUFFER_ADDR_RS = 9
BUFFER2_ADDR_RS = 10

# BLK simulator registers
BLK_ON_OFF_ADDR = 4
BLK_SELECT_ADDR = 0
BLK_SENSOR_SET_ADDR = 0

# Control unit registers
BU_KADR_TYPE_ADDR = 20

# Frame type value that switches the receiver off
KADR_TYPE_OFF = 255


class KadrType(IntEnum):
    """Telemetry frame formats the receiver understands."""

    RTSC = 0
    RTSCM = 1
    VAAR = 2
    RTSCM1 = 3


class BlkNumber(IntEnum):
    """BLK unit indices."""

    BLK1 = 0
    BLK2 = 1
    BLK3 = 2
    BLK4 = 3


class BlkFreq(IntEnum):
    """BLK sensor polling frequencies."""

    BOFF = 0
    F500Hz = 1
    F1000Hz = 2
    F2000Hz = 3
    F4000Hz = 4
    F8000Hz = 5
    F16000Hz = 6
    F32000Hz = 7
    F64000Hz = 8
    F128000Hz = 9


class BlkType(IntEnum):
    """BLK sensor signal shapes."""

    BCONST = 0
    BINC = 1
    BDEC = 2
    BSIN = 3
    BSUM = 4
    BRIGHT = 5
    BLEFT = 6


_KADR_TYPE_CODES = (2, 1, 1, 1)


def kadr_type_code(kadr_type):
    """Return the control-unit register value that selects ``kadr_type``."""
    index = int(kadr_type)
    if not 0 <= index < len(_KADR_TYPE_CODES):
        raise ValueError(f"unknown frame type: {kadr_type!r}")
    return _KADR_TYPE_CODES[index]