[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gamechain"
version = "0.1.0"
description = "Matchmaking, game runners, turn-based boards, a game registry and chain specifications for an on-chain game platform"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "games",
    "board-games",
    "matchmaking",
    "turn-based",
    "chain-spec",
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
    "Topic :: Games/Entertainment :: Board Games",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gamechain = "gamechain.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["gamechain"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
