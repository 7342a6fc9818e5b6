# pultctl

`pultctl` drives the TK170 test console. It loads settings sets
("ustavki") into the MAS, digital-MAS (DM2/DM6) and BLK simulators, writes
images into the ROM (PZU) simulator, and reads and writes the INI files that
describe devices and their settings sets.

The package uses only the standard library.

## Modules

| Module               | Contents                                                             |
|----------------------|----------------------------------------------------------------------|
| `pultctl.constants`  | Modbus slave and register addresses, `KadrType`, `BlkNumber`, `BlkFreq`, `BlkType`, `kadr_type_code` |
| `pultctl.settings`   | `IniSettings`: INI files with Qt-style keys and arrays               |
| `pultctl.mas_data`   | `MasData`, `LinkChannel`: link-channel data of one MAS or DM         |
| `pultctl.pzu`        | ROM images: `LoadingType`, `convert_htf`, `read_htf`, `merge_roms`, `build_pzu_image`, `PzuLoadError` |
| `pultctl.progress`   | `WriteProgress`, `ModalResult`: state of a timed frame recording     |
| `pultctl.logsetup`   | Session log file, build banner, archiving of a log after a failure   |
| `pultctl.commands`   | `Console`, `ModbusClient`, `ModbusError`: commands sent to the console |
| `pultctl.device`     | `DeviceConfig`, `load_device_config`, `load_device_list`, paths, `EventLog` |
| `pultctl.loader`     | `UstavkiLoader`, `UstavkiLoadError`, `LoadReport`                     |

## Settings files

`IniSettings(path, encoding)` reads an INI file if it exists. Keys are
slash-separated paths (`"DMAS/DMAS2_Start"`) matched case-insensitively;
`value(key, default)` converts the stored text to the type of `default`.
Arrays use the `prefix/size` and `prefix/<n>/key` layout with 1-based
entries: `array_size(prefix)` gives the size, `read_array(prefix)` returns one
settings view per entry, and `write_array(prefix, items)` stores a sequence of
mappings (list values become nested arrays). `save()` writes the file back.

```python
from pultctl.settings import IniSettings
from pultctl.device import device_ini_path, ustavki_path, load_device_config

device = IniSettings(device_ini_path("/opt/pult", 0), "cp1251")
config = load_device_config(device)

ustavki = IniSettings(ustavki_path("/opt/pult", 0, 2), "cp1251")
```

`load_device_list(settings)` returns the device names of the main settings
file and the index of the last selected device.

## Talking to the console

`Console` wraps an object that follows the `ModbusClient` protocol
(`write_holding_register`, `write_multiple_holding_registers`, `write_coil`,
`write_multiple_coils`, `read_input_registers`). The client raises
`ModbusError` when a transaction fails, and `Console` lets it pass through.

```python
from pultctl.commands import Console
from pultctl.constants import IMM_DMAS_ADDR, KadrType

console = Console(client)
console.select_kadr_type(KadrType.RTSCM, True)
console.load_dmas2(IMM_DMAS_ADDR, 0, 200, 1, 10)
if console.fpga_loaded():
    ...
```

Loading a complete settings set, with a log of every step:

```python
from pultctl.device import EventLog
from pultctl.loader import UstavkiLoader, UstavkiLoadError

log = EventLog()
try:
    report = UstavkiLoader(console, config, log).load(ustavki)
except UstavkiLoadError as exc:
    print("settings not loaded:", exc, exc.mas, exc.blk)
else:
    print("loaded MAS:", report.mas, "BLK:", report.blk)
```

## ROM simulator images

```python
from pultctl.pzu import LoadingType, build_pzu_image

image = build_pzu_image(LoadingType.TA528_DUAL, "prog.01", "prog.02")
console.load_pzu(image, 0, False, print)
console.start_pzu(True)
```

A TA528 image comes from one binary file (`TA528_SINGLE`), from a pair of
low/high ROM dumps of at least 1536 bytes each (`TA528_DUAL`, `merge_roms`),
or from an HTF bit-string listing (`TA528_HTF`, `convert_htf`, `read_htf`).
`TA539` yields an empty image. Unreadable or too short files raise
`PzuLoadError`.

## Session log

`install_log(path)` writes a header to the log file and routes the `logging`
module to it and to stdout with `(II)`, `(WW)`, `(EE)` and `(FF)` markers.
`finish_log(handler, exit_code, archive_dir)` closes it and, for a non-zero
exit code, zips it into `archive_dir` with `archive_log`.

## What the package does not do

- It has no Modbus TCP transport of its own: the caller supplies the
  `ModbusClient` object.
- It has no window or dialog, and no command to run; it is a library.
- It does not receive or check telemetry frames; `WriteProgress` only holds
  the state of a recording.

## Tests

The test suite uses pytest; install the `test` extra and run `pytest`.