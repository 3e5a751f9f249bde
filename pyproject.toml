[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "starterapp"
version = "1.0.0"
description = "Starter HTTP API for customers, events and user profiles, with message models and helpers for an event listener"
requires-python = ">=3.10"
keywords = ["flask", "sqlalchemy", "rest", "api", "starter", "events", "swagger"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
    "Typing :: Typed",
]
dependencies = [
    "flask>=2.2",
    "sqlalchemy>=2.0",
    "requests>=2.28",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[project.scripts]
starterapp-api = "starterapp.app:main"
starterapp-migrate = "starterapp.db:main"

[tool.hatch.build.targets.wheel]
packages = ["starterapp"]

[tool.hatch.build.targets.sdist]
include = ["starterapp", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
