[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ordkit"
version = "0.1.0"
description = "Ordinal-aware wallet helpers: transaction primitives, fee and postage rules, wallet summaries and explorer page pieces"
requires-python = ">=3.10"
dependencies = []
keywords = ["bitcoin", "ordinals", "sats", "inscriptions", "wallet", "transactions"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ordkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
