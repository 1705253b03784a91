[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "heapsim"
version = "0.1.0"
description = "A simulated heap allocator with first-fit and best-fit strategies, block splitting, coalescing and a terminal heap map"
requires-python = ">=3.10"
dependencies = []
keywords = ["allocator", "malloc", "heap", "free list", "memory", "simulation", "education"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: System :: Operating System",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["heapsim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
