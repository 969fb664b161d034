[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "labkernel"
version = "0.1.0"
description = "A simulated teaching kernel: memory partitions, a kernel heap, a wall clock, a VGA/UART console and a command shell"
requires-python = ">=3.10"
dependencies = []
keywords = ["kernel", "simulation", "allocator", "teaching", "shell", "printf"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["labkernel"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
