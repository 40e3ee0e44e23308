[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gazer_node"
version = "0.1.0"
description = "Monitoring node that samples values from local units and publishes them to a remote server"
requires-python = ">=3.10"
keywords = ["monitoring", "telemetry", "metrics", "serial-port", "system-stats"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]
dependencies = [
    "psutil",
    "pyserial",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
gazer-node = "gazer_node.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["gazer_node"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
