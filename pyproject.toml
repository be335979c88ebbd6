[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kooremap"
version = "1.0.0"
description = "Structured hexahedral mesh generation and strain/stress analysis for finite-element meshes."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "finite-element",
    "mesh",
    "hexahedral",
    "strain",
    "stress",
    "deformation-gradient",
    "catmull-rom",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["kooremap"]

[tool.hatch.build.targets.sdist]
include = ["kooremap", "tests"]

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
