[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "auctionhouse"
version = "0.1.0"
description = "HTTP service for running timed auctions with batched bid storage in MongoDB"
requires-python = ">=3.10"
keywords = ["auction", "bids", "rest", "mongodb", "flask"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "flask>=2.2",
    "pymongo>=4.0",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
auctionhouse = "auctionhouse.app:main"

[tool.hatch.build.targets.wheel]
packages = ["auctionhouse"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
