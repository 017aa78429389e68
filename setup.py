"""
Setup script for ir-engine.

ir-engine is the session scheduling core of an incremental-reading
flashcard tool. It serves three roles:

1. Scheduler - FSRS and fixed-interval topic scheduling of memory state
2. Ranker - JD1 priority scoring and Anki-style bucket ordering
3. Session - Volatile "again" queue, cooldown and clump limiting

The 'ir-engine' command is a developer tool for replaying sessions
over JSON fixture pools.
"""

from setuptools import find_packages, setup

setup(
    name="ir-engine",
    version="0.3.0",
    description="Spaced-repetition session engine for incremental reading",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Incremental Reading",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # Scheduling
        "fsrs>=6.0.0",
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
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
            "ir-engine=ir_engine.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning spaced-repetition fsrs incremental-reading education",
)
