[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "proctable"
version = "0.1.0"
description = "Process sampling, column values, configuration and terminal styling for Linux procfs"
requires-python = ">=3.11"
keywords = ["process", "ps", "procfs", "monitoring", "terminal", "toml"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]
dependencies = [
    "wcwidth",
    "tomli-w",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["proctable"]

[tool.pytest.ini_options]
addopts = "-ra"
