[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sisop"
version = "0.1.0"
description = "Kernel, CPU, memory and I/O processes that connect over TCP and exchange length-prefixed packets"
requires-python = ">=3.10"
dependencies = []
keywords = ["operating-systems", "simulation", "sockets", "protocol", "kernel", "cpu", "memory"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sisop-cpu = "sisop.cpu:main"
sisop-io = "sisop.io_device:main"
sisop-kernel = "sisop.kernel:main"
sisop-memoria = "sisop.memoria:main"

[tool.hatch.build.targets.wheel]
packages = ["sisop"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
