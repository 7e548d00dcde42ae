[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kvnet"
version = "0.1.0"
description = "A small length-prefixed TCP message server and client built on a selector event loop"
requires-python = ">=3.10"
dependencies = []
keywords = ["tcp", "socket", "server", "client", "event-loop", "framing"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
kvnet-server = "kvnet.server:main"
kvnet-client = "kvnet.client:main"

[tool.hatch.build.targets.wheel]
packages = ["kvnet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
