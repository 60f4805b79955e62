"""
Setup script for study-planner.

Study Planner is the adaptive scheduling and analytics engine of the
language-course platform. It turns a learner's progress snapshot, goals and
weekly availability into dated study sessions, measures how those sessions
go and adapts the plan.

The 'study-planner' command is a developer tool for building plans from a
snapshot file or from the live progress service.
"""

from setuptools import find_namespace_packages, setup

setup(
    name="study-planner",
    version="1.0.0",
    description="Adaptive study plan scheduling and analytics engine",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Neolingus",
    packages=find_namespace_packages(include=["src", "src.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # HTTP
        "httpx>=0.25.0",
        # Logging
        "loguru>=0.7.0",
        # Timezone database for zoneinfo
        "tzdata>=2023.3",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "study-planner=src.cli.planner_cli:run",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
    ],
    keywords="study-plan scheduling spaced-repetition education analytics",
)
