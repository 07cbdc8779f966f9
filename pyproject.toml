[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "siilang"
version = "0.1.0"
description = "Front end pieces and an intermediate representation for a small C-like language"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "compiler",
    "intermediate-representation",
    "ast",
    "basic-block",
    "type-system",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["siilang"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
