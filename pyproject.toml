[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bfvcrypt"
version = "0.1.0"
description = "BFV homomorphic encryption over negacyclic polynomial rings with NTT-based arithmetic"
requires-python = ">=3.10"
dependencies = []
keywords = ["homomorphic encryption", "bfv", "lattice", "ntt", "cryptography"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["bfvcrypt"]

[tool.pytest.ini_options]
addopts = "-ra"
