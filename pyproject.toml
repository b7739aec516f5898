[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pumpsim"
version = "0.1.0"
description = "A simulated insulin pump with CGM readings, bolus safety checks, Control-IQ style adjustments and a history log."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "insulin",
    "pump",
    "cgm",
    "bolus",
    "simulation",
    "diabetes",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Medical Science Apps.",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
pumpsim = "pumpsim.app:main"

[tool.hatch.build.targets.wheel]
packages = ["pumpsim"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
