[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tampayang"
version = "0.1.0"
description = "Core logic for an infrastructure damage reporting service: login guarding, location rules, report handling, statistics and exports."
requires-python = ">=3.10"
keywords = [
    "infrastructure",
    "damage-reports",
    "csv",
    "xlsx",
    "pdf",
    "elasticsearch",
    "rate-limiting",
]
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
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
    "Typing :: Typed",
]
dependencies = [
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["tampayang"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
