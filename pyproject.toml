[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "coinbot"
version = "0.1.0"
description = "Moving-average trade signals, portfolio records, Slack reports and transaction CSV import for a crypto exchange account"
requires-python = ">=3.10"
keywords = ["crypto", "trading", "moving-average", "slack", "portfolio", "csv-import"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Investment",
]
dependencies = [
    "requests>=2.28",
    "sqlalchemy>=2.0",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[project.scripts]
coinbot-import = "coinbot.importer:main"

[tool.hatch.build.targets.wheel]
packages = ["coinbot"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
