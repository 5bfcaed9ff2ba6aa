[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "slicesched"
version = "0.1.0"
description = "A small HTTP service that runs submitted tasks in time slices under FIFO or SRTF scheduling"
requires-python = ">=3.10"
dependencies = []
keywords = ["scheduler", "fifo", "srtf", "time-slice", "http", "wsgi", "tasks"]
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
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
slicesched = "slicesched.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["slicesched"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
