# pylint: disable=missing-module-docstring
# ruff: noqa

from pathlib import Path

from setuptools import find_packages, setup


def read_long_description() -> str:
    """Return README contents for PyPI description."""
    readme_path = Path(__file__).with_name("README.md")
    return readme_path.read_text(encoding="utf-8") if readme_path.exists() else "TrendWise trend engine"


setup(
    name="trendwise-engine",
    version="0.1.0",
    description="Trending-topic aggregation, de-duplication and fallback synthesis",
    long_description=read_long_description(),
    long_description_content_type="text/markdown",
    python_requires=">=3.11",
    packages=find_packages(include=["trend_engine", "trend_engine.*", "trendwise", "trendwise.*"]),
    include_package_data=True,
    install_requires=[
        "pandas>=2.0",
        "httpx>=0.26",
        "pydantic>=2.5",
        "python-dotenv>=1.0",
    ],
    extras_require={
        "test": ["pytest>=7.4"],
    },
    entry_points={
        "console_scripts": [
            "trendwise-trends = trendwise.cli_entrypoints:trends",
            "trendwise-trends-offline = trendwise.cli_entrypoints:trends_offline",
        ]
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
