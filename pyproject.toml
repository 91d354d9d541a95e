[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sailnav"
version = "0.1.0"
description = "Navigation and control logic for an autonomous sailboat: layline path planning, rudder and sail control, a telemetry link and sensor drivers."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "sailing",
    "sailboat",
    "navigation",
    "path-planning",
    "layline",
    "autonomous",
    "gnss",
    "compass",
    "ubx",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sailnav = "sailnav.app:main"

[tool.hatch.build.targets.wheel]
packages = ["sailnav"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
