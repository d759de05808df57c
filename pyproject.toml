[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wgcore"
version = "0.1.0"
description = "Building blocks of a userspace WireGuard daemon: replay filter, TAI64N timestamps, handshake rate limiting, timers and the UAPI configuration protocol"
requires-python = ">=3.10"
dependencies = []
keywords = ["wireguard", "vpn", "uapi", "replay-protection", "tai64n", "ratelimiter"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["wgcore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
