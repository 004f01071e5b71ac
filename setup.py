"""Setup configuration for the SOW document engine."""

from setuptools import find_packages, setup

setup(
    name="sow-engine",
    version="0.1.0",
    packages=find_packages(include=["src", "src.*"]),
    package_dir={"": "."},
    package_data={"src.catalog": ["rate_card.yaml"]},
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0",
        "PyYAML>=6.0",
        "python-dotenv>=1.0",
        "requests>=2.31",
        "boto3>=1.28",
        "click>=8.1",
        "weasyprint>=60.0",
        "openpyxl>=3.1",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "sow=src.cli:cli",
        ],
    },
)
