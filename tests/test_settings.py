import pytest

from pultctl.settings import IniSettings


@pytest.fixture
def ini(tmp_path):
    return IniSettings(tmp_path / "pult.ini", "Windows-1251")


def test_missing_key_returns_default(ini):
    assert ini.value("Device", 7) == 7
    assert ini.value("nothing") is None


def test_typed_conversion(ini):
    ini.set_value("Flag", True)
    ini.set_value("Count", 12)
    ini.set_value("Name", "dev")
    assert ini.value("Flag", False) is True
    assert ini.value("Count", 0) == 12
    assert ini.value("Name", "") == "dev"
    assert ini.value("Count", "") == "12"


def test_bool_parsing_of_strings(ini):
    ini.set_value("a", "false")
    ini.set_value("b", "0")
    ini.set_value("c", "yes")
    assert ini.value("a", True) is False
    assert ini.value("b", True) is False
    assert ini.value("c", False) is True


def test_bad_int_gives_zero(ini):
    ini.set_value("n", "abc")
    assert ini.value("n", 5) == 0


def test_case_insensitive_keys(ini):
    ini.set_value("Device/1/devName", "alpha")
    assert ini.value("device/1/DevName", "") == "alpha"
    assert "DEVICE/1/DEVNAME" in ini


def test_array_round_trip(ini):
    ini.write_array("MAS", [{"Enable": True, "Name": "m0"}, {"Enable": False, "Name": "m1"}])
    assert ini.array_size("MAS") == 2
    entries = ini.read_array("MAS")
    assert [e.value("Name", "") for e in entries] == ["m0", "m1"]
    assert [e.value("Enable", False) for e in entries] == [True, False]


def test_sparse_array_write_sets_size(ini):
    ini.write_array("Device", {3: {"devName": "late"}})
    assert ini.array_size("Device") == 4
    assert ini.read_array("Device")[3].value("devName", "") == "late"
    assert ini.read_array("Device")[0].value("devName", "none") == "none"


def test_nested_arrays(ini):
    ini.write_array("MAS", [{"LK": [{"Addr": 5, "Buffer": [{"Buf": 1}, {"Buf": 2}]}]}])
    lk = ini.read_array("MAS")[0].read_array("LK")[0]
    assert lk.value("Addr", 0) == 5
    assert [b.value("Buf", 0) for b in lk.read_array("Buffer")] == [1, 2]
    assert ini.value("MAS/1/LK/1/Buffer/2/Buf", 0) == 2


def test_view_writes_are_shared(ini):
    ini.write_array("MAS", [{"Name": "x"}])
    entry = ini.read_array("MAS")[0]
    entry.set_value("Name", "y")
    assert ini.value("MAS/1/Name", "") == "y"


def test_save_and_reload(tmp_path):
    path = tmp_path / "dev" / "device.ini"
    ini = IniSettings(path, "Windows-1251")
    ini.set_value("MAS485_OP", True)
    ini.set_value("KadrType", 2)
    ini.write_array("BLK", [{"Name": "БЛК0", "Enable": True}])
    ini.set_value("Note", "a, b; c=\"d\"")
    ini.save()
    again = IniSettings(path, "Windows-1251")
    assert again.value("MAS485_OP", False) is True
    assert again.value("KadrType", 0) == 2
    assert again.read_array("BLK")[0].value("Name", "") == "БЛК0"
    assert again.value("Note", "") == "a, b; c=\"d\""


def test_save_uses_requested_encoding(tmp_path):
    path = tmp_path / "u.ini"
    ini = IniSettings(path, "Windows-1251")
    ini.set_value("Name", "БЛК0")
    ini.save()
    assert "БЛК0".encode("cp1251") in path.read_bytes()


def test_parse_qt_style_file(tmp_path):
    path = tmp_path / "ust.ini"
    path.write_text(
        "[General]\nMAS485_OP=true\n\n[MAS]\n1\\Enable=true\n1\\Name=m\nsize=1\n\n"
        "[DMAS]\nDMAS2_Start=4\n",
        encoding="utf-8",
    )
    ini = IniSettings(path)
    assert ini.value("MAS485_OP", False) is True
    assert ini.array_size("MAS") == 1
    assert ini.read_array("MAS")[0].value("Name", "") == "m"
    assert ini.value("DMAS/DMAS2_START", 0) == 4