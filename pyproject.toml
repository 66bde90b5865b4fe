[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "litho-book"
version = "0.1.6"
description = "A web-based reader for Markdown documentation trees"
requires-python = ">=3.10"
dependencies = [
    "mistune>=3",
]
keywords = ["documentation", "markdown", "reader", "web", "wsgi"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Environment :: Web Environment",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Documentation",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
    "Topic :: Text Processing :: Markup :: Markdown",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
litho-book = "litho_book.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["litho_book"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
