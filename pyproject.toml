[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ocworker"
version = "0.1.0"
description = "Compute worker building blocks: channel pools, a routed websocket client and array compute kernels"
requires-python = ">=3.10"
keywords = ["worker", "websocket", "channels", "matrix", "distributed"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: System :: Distributed Computing",
]
dependencies = [
    "websockets",
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["ocworker"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
