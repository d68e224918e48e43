[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dmnd_client"
version = "0.2.4"
description = "Mining proxy core: proxy health state, share accounting relay, job id tracking and monitoring client"
requires-python = ">=3.10"
keywords = ["mining", "stratum", "proxy", "shares", "monitoring", "asyncio"]
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
    "Framework :: AsyncIO",
    "Topic :: Internet :: Proxy Servers",
]
dependencies = [
    "httpx",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
    "respx",
]

[tool.hatch.build.targets.wheel]
packages = ["dmnd_client"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
