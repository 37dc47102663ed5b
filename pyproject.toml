[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pipetoolkit"
version = "0.1.0"
description = "Utility toolkit: URL and base64 codecs, lock-free local time, file helpers, event notification, a small JSON value model and log channels"
requires-python = ">=3.10"
dependencies = []
keywords = ["logging", "json", "base64", "events", "filesystem", "utilities"]
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
    "Topic :: Software Development :: Libraries",
    "Topic :: System :: Logging",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pipetoolkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
