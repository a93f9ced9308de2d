#!/usr/bin/env python
"""
Grocery Dashboard Analytics Setup
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

test_requirements = [
    "pytest>=7.4.0",
    "pytest-asyncio>=0.24.0",
    "pytest-cov>=4.1.0",
    "aiosqlite>=0.19.0",
    "httpx>=0.25.0",
]

setup(
    name="grocery-dashboard-analytics",
    version="1.0.0",
    description="Snapshot analytics for a grocery-delivery operations dashboard",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["grocery_analytics", "grocery_analytics.*"]),
    python_requires=">=3.11",
    install_requires=requirements,
    extras_require={
        "test": test_requirements,
        "dev": test_requirements + [
            "black>=23.0.0",
            "ruff>=0.1.0",
            "mypy>=1.5.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "grocery-analytics=grocery_analytics.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Framework :: FastAPI",
        "Topic :: Office/Business",
    ],
    zip_safe=False,
    keywords=["grocery", "dashboard", "analytics", "polars", "fastapi"],
)
