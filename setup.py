"""Setup script for s3-checker."""

from pathlib import Path

from setuptools import find_packages, setup

# Read README
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text() if readme_file.exists() else ""

# Keep in sync with s3checker/__init__.py
version = "1.0.0"

setup(
    name="s3-checker",
    version=version,
    description="S3 bucket discovery and exposure audit tool",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="s3-checker contributors",
    packages=find_packages(include=["s3checker", "s3checker.*", "cli", "cli.*"]),
    package_data={"s3checker": ["data/*.txt"]},
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "click>=8.1.0",
        "rich>=13.0.0",
        "httpx>=0.25.0",
        "pyyaml>=6.0",
        "loguru>=0.7.0",
        "pydantic-settings>=2.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "black>=23.10.0",
            "flake8>=6.1.0",
            "mypy>=1.6.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "s3-checker=cli.main:cli",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Information Technology",
        "Intended Audience :: System Administrators",
        "Topic :: Security",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Operating System :: OS Independent",
        "Environment :: Console",
    ],
    keywords="s3 bucket security recon audit cli",
)
