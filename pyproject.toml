[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "benchpaint"
version = "0.1.0"
description = "Picosecond-precise durations, timers, number formatting and tree-style reports for benchmark results"
requires-python = ">=3.10"
dependencies = []
keywords = ["benchmark", "timing", "duration", "throughput", "report", "formatting"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Testing",
    "Topic :: System :: Benchmark",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["benchpaint"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
