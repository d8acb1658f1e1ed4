[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "skylinegen"
version = "0.1.0"
description = "Generate a 3D-printable STL skyline from a user's GitHub contribution calendar"
requires-python = ">=3.10"
dependencies = [
    "requests",
]
keywords = ["github", "skyline", "stl", "3d-printing", "contributions"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Modeling",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
skylineg = "skylinegen.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["skylinegen"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
