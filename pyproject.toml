[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bridgetraffic"
version = "0.1.0"
description = "Interactive traffic simulation of a six-lane bridge with lane changes, breakdowns, weather effects and statistics"
requires-python = ">=3.10"
dependencies = ["pygame"]
keywords = ["traffic", "simulation", "bridge", "lane change", "pygame"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: X11 Applications",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Visualization",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
bridgetraffic = "bridgetraffic.app:main"

[tool.hatch.build.targets.wheel]
packages = ["bridgetraffic"]

[tool.pytest.ini_options]
addopts = "-ra"
