[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "minikit"
version = "0.1.0"
description = "Pure-Python pieces for sequence alignment: FASTA/FASTQ reading, range-minimum trees, sorting helpers, CIGAR handling and spliced extension alignment"
requires-python = ">=3.10"
dependencies = []
keywords = ["bioinformatics", "alignment", "fasta", "fastq", "cigar", "splice", "avl-tree", "range-minimum-query"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["minikit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
