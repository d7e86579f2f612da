[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jamkit"
version = "0.1.0"
description = "Building blocks of the Jam build tool: regular expressions, output filters, path handling, variables, rules, scanning and target search"
requires-python = ">=3.10"
dependencies = []
keywords = ["jam", "build", "build-tool", "regex", "tokenizer"]
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
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["jamkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
