[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pulsetel"
version = "0.1.0"
description = "Lightweight event telemetry: handlers, timed spans, a worker pool and a test mailbox"
requires-python = ">=3.10"
dependencies = []
keywords = ["telemetry", "events", "instrumentation", "spans", "monitoring"]
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
    "Topic :: System :: Monitoring",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pulsetel"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
