"""Setup script for cutlist_reconcile package."""

from setuptools import setup, find_packages

setup(
    name="cutlist_reconcile",
    version="1.0.0",
    description="Reconciliation layer for furniture panel cutlists",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pyyaml>=6.0",
        "json-repair>=0.25.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov",
        ],
    },
    entry_points={
        "console_scripts": [
            "cutlist-reconcile=cutlist_reconcile.cli:main",
        ],
    },
)
