[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pultctl"
version = "1.0.0"
description = "TK170 test console control: MAS, DM and BLK simulator settings, ROM simulator images and INI settings files"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "modbus",
    "test-bench",
    "simulator",
    "telemetry",
    "rom",
    "ini",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Manufacturing",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pultctl"]

[tool.hatch.build.targets.sdist]
include = ["pultctl", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
check_untyped_defs = true
