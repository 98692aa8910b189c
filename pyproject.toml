[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "forgeshell"
version = "0.1.0"
description = "A small command shell toolkit with safety checks, workflows, globbing, text search, file watching and bulk file operations"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "shell",
    "command",
    "safety",
    "workflow",
    "glob",
    "search",
    "file-watcher",
    "bulk-operations",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["forgeshell"]

[tool.pytest.ini_options]
addopts = "-ra"
