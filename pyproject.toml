[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jcontainers"
version = "0.1.0"
description = "Reference-counted object registry with an autorelease queue, a garbage collector, script-class reflection and a batch JSON validator"
requires-python = ">=3.10"
dependencies = []
keywords = ["containers", "reference counting", "garbage collection", "reflection", "json", "validation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
jc-json-validator = "jcontainers.validator:main"

[tool.hatch.build.targets.wheel]
packages = ["jcontainers"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
