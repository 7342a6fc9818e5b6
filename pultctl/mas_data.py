"""Link-channel data of one MAS or digital MAS simulator, read from a settings file."""

from __future__ import annotations

from dataclasses import dataclass, field

LK_COUNT = 4
LK_CHANNELS = 128
DM_BUFFER_SIZE = 64
NO_CONST_POS = 300


@dataclass
class LinkChannel:
    """Parameters and buffer contents of one link channel (LK)."""

    addr: int = 0
    adder: int = 0
    const1_pos: int = 0
    const1: int = 0
    const2_pos: int = 0
    const2: int = 0
    buffer_size: int = 0
    data: bytearray = field(default_factory=lambda: bytearray(LK_CHANNELS))


class MasData:
    """Data of one MAS (``is_mas``) or digital MAS simulator."""

    def __init__(self, name):
        self.name = name
        self.loading = False
        self.dual_ps1 = False
        self.dual_ps2 = False
        self.mas_num = 0
        self.is_mas = False
        self.channels = [LinkChannel() for _ in range(LK_COUNT)]

    def load(self, settings, mas_number, mas_dm):
        """Load data for MAS ``mas_number`` (or DM2/DM6 when ``mas_dm`` is false).

        Raises ValueError when the MAS number exceeds the array in the file.
        """
        self.is_mas = mas_dm
        if mas_dm:
            self._load_mas(settings, mas_number)
        else:
            self._load_dm(settings, mas_number)

    def _load_mas(self, settings, mas_number):
        if mas_number > settings.array_size("MAS"):
            raise ValueError(f"MAS number {mas_number} is out of range")
        self.dual_ps1 = settings.value("MAS/DualPS1", False)
        self.dual_ps2 = settings.value("MAS/DualPS2", False)
        entries = settings.read_array("MAS")
        if mas_number >= len(entries):
            return
        for channel, lk in zip(self.channels, entries[mas_number].read_array("LK")):
            channel.addr = lk.value("Addr", 0) & 0xFF
            channel.adder = lk.value("Adder", 0) & 0xFF
            channel.const1_pos = lk.value("Const1Pos", 255) & 0xFFFF
            channel.const1 = lk.value("Const1", 0) & 0xFF
            channel.const2_pos = lk.value("Const2Pos", 255) & 0xFFFF
            channel.const2 = lk.value("Const2", 0) & 0xFF
            channel.buffer_size = lk.value("BufferSize", 0) & 0xFFFF
            count = min(channel.buffer_size, LK_CHANNELS)
            channel.data[:count] = bytes(
                lk.value(f"Buffer/{pos + 1}/buf", 0) & 0xFF for pos in range(count)
            )

    def _load_dm(self, settings, mas_number):
        self.mas_num = mas_number
        for channel in self.channels:
            channel.adder = 0
            channel.buffer_size = DM_BUFFER_SIZE
            channel.const1_pos = NO_CONST_POS
            channel.const2_pos = NO_CONST_POS

        key = "DMAS2" if mas_number == 0 else "DMAS6"
        start = settings.value(f"DMAS/{key}_START", 0) & 0xFF
        increment = settings.value(f"DMAS/{key}_INCREMENT", 0) & 0xFF
        stop = settings.value(f"DMAS/{key}_STOP", 0) & 0xFF

        for channel in self.channels:
            channel.data[0] = start

        sequence = self.channels[0].data
        current = start
        for pos in range(1, DM_BUFFER_SIZE):
            current = (current + increment) & 0xFF
            if current > stop:
                current = start
            sequence[pos] = current

    def lk_data(self, lk_num, channel):
        return self.channels[lk_num].data[channel]

    def adder_enabled(self, lk_num):
        return self.channels[lk_num].adder != 0

    def const1_pos(self, lk_num):
        return self.channels[lk_num].const1_pos if self.is_mas else NO_CONST_POS

    def const2_pos(self, lk_num):
        return self.channels[lk_num].const2_pos if self.is_mas else NO_CONST_POS