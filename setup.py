"""Setup configuration for PineScript Assistant package."""

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

setup(
    name="pinescript-assistant",
    version="0.1.0",
    author="PineScript Assistant Contributors",
    description="LLM-backed analysis, enhancement and templates for PineScript trading scripts",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["pinescript_assistant", "pinescript_assistant.*"]),
    python_requires=">=3.11",
    install_requires=[
        "httpx>=0.27.0",
        "pydantic>=2.8.0",
    ],
    extras_require={
        "dev": [
            "pytest>=8.3.3",
            "pytest-cov>=5.0.0",
            "mypy>=1.11.2",
            "black>=24.8.0",
            "ruff>=0.6.9",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Office/Business :: Financial :: Investment",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
    ],
)
