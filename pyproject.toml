[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "samknn"
version = "0.1.0"
description = "Self-adjusting memory k-nearest-neighbour classifier for drifting data streams"
requires-python = ">=3.10"
dependencies = []
keywords = ["knn", "concept-drift", "stream-learning", "online-learning", "classification"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
samknn = "samknn.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["samknn"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
