"""Package metadata for vers (semantic version records in JSON/YAML files)."""

from setuptools import find_packages, setup

setup(
    name="vers",
    version="0.4.0",
    description="Keep semantic version numbers for named entries in a locked JSON or YAML file",
    python_requires=">=3.11",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "click>=8.1",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": ["pytest>=8.0"],
    },
    entry_points={
        "console_scripts": ["vers = vers.cli:cli"],
    },
)
