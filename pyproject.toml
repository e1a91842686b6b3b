[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "devreload"
version = "0.1.0"
description = "Rebuild and restart a server when its sources change, plus config and logging helpers"
requires-python = ">=3.10"
keywords = ["reload", "watch", "rebuild", "development", "file-watcher", "config", "logging"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]
dependencies = [
    "watchdog",
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
devreload = "devreload.monitor:main"

[tool.hatch.build.targets.wheel]
packages = ["devreload"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
