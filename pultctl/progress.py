"""Progress state of a frame recording session."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ModalResult(IntEnum):
    """How a recording session ended."""

    NONE = 0
    OK = 1
    CANCEL = 2


@dataclass
class WriteProgress:
    """Elapsed time, remaining time and frame count of a recording."""

    maximum: int = 100
    value: int = 0
    remaining: int = 0
    kadr_num: int = 0
    modal_result: ModalResult = ModalResult.NONE
    hidden: bool = False

    @property
    def time_label(self) -> str:
        return f"{self.remaining} c."

    def set_start_data(self, time_val):
        """Start a recording that lasts ``time_val`` seconds."""
        self.maximum = time_val
        self.value = 0
        self.kadr_num = 0
        self.remaining = time_val

    def update(self, time, kadr_num):
        """Record ``time`` elapsed seconds and ``kadr_num`` received frames."""
        self.remaining = self.maximum - time
        if 0 <= time <= self.maximum:
            self.value = time
        self.kadr_num = kadr_num

    def cancel(self):
        self.modal_result = ModalResult.CANCEL
        self.hidden = True

    def stop(self):
        self.modal_result = ModalResult.OK
        self.hidden = True