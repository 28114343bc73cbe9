[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nescpu"
version = "0.1.0"
description = "A 6502 CPU core for the NES with iNES ROM loading, disassembly and instruction tracing"
requires-python = ">=3.10"
dependencies = []
keywords = ["nes", "6502", "emulator", "cpu", "disassembler", "ines"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
nescpu = "nescpu.machine:main"

[tool.hatch.build.targets.wheel]
packages = ["nescpu"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
