[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "peril"
version = "0.1.0"
description = "Game rules and AMQP messaging helpers for Peril, a multiplayer turn-based strategy game of armies and continents"
requires-python = ">=3.10"
keywords = ["game", "strategy", "pubsub", "rabbitmq", "amqp", "multiplayer"]
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
    "Topic :: Games/Entertainment :: Turn Based Strategy",
    "Topic :: System :: Distributed Computing",
]
dependencies = [
    "pika>=1.3",
    "msgpack>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[tool.hatch.build.targets.wheel]
packages = ["peril"]

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
