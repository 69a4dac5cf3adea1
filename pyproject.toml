[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kornshell"
version = "0.1.0"
description = "Pieces of a Korn-style shell: input sources, glob matching, option parsing, path utilities and mail checking"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "ksh", "glob", "getopt", "mailpath"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["kornshell"]

[tool.pytest.ini_options]
addopts = "-ra"
