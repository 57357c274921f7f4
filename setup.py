# setup.py
from setuptools import setup, find_packages

setup(
    name="logo_scout",
    version="0.1.0",
    description="Asynchronous logo extraction and perceptual-hash grouping of websites",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"logo_scout.report": ["templates/*.j2"]},
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "CairoSVG>=2.7",
        "click>=8.1",
        "Jinja2>=3.1",
        "Pillow>=10.1",
        "playwright>=1.40",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.4", "pytest-asyncio>=0.23"],
    },
    entry_points={"console_scripts": ["logo-scout=logo_scout.cli:cli"]},
    python_requires=">=3.11",
)
