"""
Statecraft - turn-based nation management simulation engine.
"""

from setuptools import setup, find_packages

setup(
    name="statecraft-engine",
    version="0.1.0",
    description="Turn-based political and economic simulation engine with a factional "
                "parliament, judicial review, regional economy and scheming ministers.",
    packages=find_packages(include=["statecraft", "statecraft.*"]),
    py_modules=["cli", "scenario_loader"],
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.24",
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
        ],
    },
    entry_points={
        "console_scripts": [
            "statecraft=cli:main",
        ],
    },
)
