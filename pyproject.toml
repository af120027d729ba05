[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "asciiarcade"
version = "0.1.0"
description = "Two-player tic-tac-toe and checkers in the terminal, played over WebSockets"
requires-python = ">=3.10"
keywords = ["terminal", "games", "checkers", "tic-tac-toe", "websockets", "multiplayer"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Framework :: AsyncIO",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Board Games",
]
dependencies = [
    "websockets>=13.0",
    "python-dotenv",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
asciiarcade = "asciiarcade.client:main"
asciiarcade-server = "asciiarcade.server:main"

[tool.hatch.build.targets.wheel]
packages = ["asciiarcade"]

[tool.pytest.ini_options]
addopts = "-ra"
