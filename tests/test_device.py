from datetime import datetime
from pathlib import Path

import pytest

from pultctl.constants import (
    IMM_OP_1_ADDR,
    IMM_OP_2_ADDR,
    IMM_RS485_1_ADDR,
    IMM_RS485_2_ADDR,
    IMM_RS485_3_ADDR,
)
from pultctl.device import (
    DeviceConfig,
    EventLog,
    device_ini_path,
    imm_addresses,
    load_device_config,
    load_device_list,
    ustavki_path,
)
from pultctl.settings import IniSettings


def _fixed_clock():
    return datetime(2024, 1, 2, 3, 4, 5)


def test_device_ini_path(tmp_path):
    assert device_ini_path(tmp_path, 3) == tmp_path / "Dev3" / "device.ini"


def test_ustavki_path(tmp_path):
    assert ustavki_path(tmp_path, 2, 5) == tmp_path / "Dev2" / "Ust5.ini"


def test_ustavki_path_rejects_negative(tmp_path):
    with pytest.raises(ValueError):
        ustavki_path(tmp_path, 0, -1)


def test_ustavki_in_device_directory(tmp_path):
    assert ustavki_path(tmp_path, 4, 0).parent == device_ini_path(tmp_path, 4).parent


def test_imm_addresses_rs485():
    addrs = imm_addresses(True)
    assert len(addrs) == 10
    assert addrs[:4] == (IMM_RS485_1_ADDR,) * 4
    assert addrs[4:8] == (IMM_RS485_2_ADDR,) * 4
    assert addrs[8:] == (IMM_RS485_3_ADDR,) * 2


def test_imm_addresses_optical():
    addrs = imm_addresses(False)
    assert len(addrs) == 8
    assert addrs[:4] == (IMM_OP_1_ADDR,) * 4
    assert addrs[4:] == (IMM_OP_2_ADDR,) * 4


def test_load_device_list(tmp_path):
    path = tmp_path / "pult.ini"
    settings = IniSettings(path, "cp1251")
    settings.write_array("Device", [{"devName": "Alpha"}, {"devName": "Бета"}])
    settings.set_value("LastState/Device", 1)
    settings.save()

    names, selected = load_device_list(IniSettings(path, "cp1251"))
    assert names == ["Alpha", "Бета"]
    assert selected == 1


def test_load_device_list_empty(tmp_path):
    names, selected = load_device_list(IniSettings(tmp_path / "none.ini"))
    assert names == []
    assert selected == 0


def test_load_device_config_round_trip(tmp_path):
    path = device_ini_path(tmp_path, 0)
    settings = IniSettings(path, "cp1251")
    settings.write_array("Ustavki", [{"ust_Name": "first"}, {"ust_Name": "second"}])
    settings.write_array(
        "MAS",
        [{"Enable": True, "Name": "MAS-A"}, {"Enable": False, "Name": "NO MAC"}],
    )
    settings.write_array("BLK", {2: {"Enable": True, "Name": "BLK-C"}})
    settings.set_value("DMAS2_Enable", True)
    settings.set_value("DMAS2_Name", "DM-two")
    settings.set_value("MAS485_OP", True)
    settings.set_value("KadrType", 2)
    settings.set_value("KadrInputType", False)
    settings.save()

    config = load_device_config(IniSettings(path, "cp1251"))
    assert config.ustavki == ["first", "second"]
    assert config.mas_number == 2
    assert config.mas_enable[:3] == [True, False, False]
    assert config.mas_name[0] == "MAS-A"
    assert config.mas_name[1] == "NO MAC"
    assert config.blk_number == 3
    assert config.blk_enable == [False, False, True, False]
    assert config.blk_name[2] == "BLK-C"
    assert config.dmas2_enable is True
    assert config.dmas2_name == "DM-two"
    assert config.mas485_op is True
    assert config.kadr_type == 2
    assert config.kadr_input_type is False


def test_load_device_config_defaults(tmp_path):
    config = load_device_config(IniSettings(tmp_path / "empty.ini"))
    assert config.ustavki == []
    assert config.mas_enable == [False] * 10
    assert config.mas_name == ["NoMAC"] * 10
    assert config.blk_name == ["NoBLK"] * 4
    assert config.dmas2_name == "No DM"
    assert config.dmas6_name == "No DM"
    assert config.dmas6_enable is False
    assert config.mas485_op is False
    assert config.kadr_type == 0
    assert config.kadr_input_type is True


def test_device_config_initial_names():
    config = DeviceConfig()
    assert config.mas_name[0] == "MAC0"
    assert config.blk_name[3] == "БЛК3"
    assert len(config.mas_enable) == 10


def test_event_log_add_uses_clock():
    log = EventLog(clock=_fixed_clock)
    row = log.add("start", False)
    assert row.time == "03:04:05"
    assert row.text == "start"
    assert row.result == ""
    assert log.result_row is None


def test_event_log_result_goes_to_waiting_row():
    log = EventLog(clock=_fixed_clock)
    log.add("waiting", True)
    log.add("plain", False)
    log.log_result(True)
    assert [r.result for r in log.rows] == ["Ok", ""]
    log.log_result(False)
    assert log.rows[0].result == "Ошибка"


def test_event_log_result_without_waiting_row():
    log = EventLog(clock=_fixed_clock)
    log.add("plain", False)
    with pytest.raises(LookupError):
        log.log_result(True)


def test_event_log_clear():
    log = EventLog(clock=_fixed_clock)
    log.add("a", True)
    log.add("b", True)
    assert log.result_row == 1
    log.clear()
    assert log.rows == []
    assert log.result_row is None
    with pytest.raises(LookupError):
        log.log_result(True)