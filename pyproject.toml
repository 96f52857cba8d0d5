[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "osproto"
version = "0.1.0"
description = "Wire protocol, payload codecs and socket helpers for the processes of a simulated operating system"
requires-python = ">=3.10"
dependencies = []
keywords = ["protocol", "serialization", "sockets", "payload", "simulator"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
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

[tool.hatch.build.targets.wheel]
packages = ["osproto"]

[tool.pytest.ini_options]
addopts = "-ra"
