# setup.py
from setuptools import setup, find_packages

setup(
    name="hopcrawl",
    version="0.1.0",
    description="Small extensible breadth-first web crawl engine",
    packages=find_packages(exclude=("tests", "tests.*")),
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
            "multidict>=6.0",
        ],
    },
    entry_points={
        "console_scripts": ["hopcrawl=hopcrawl.cli:cli"],
    },
    python_requires=">=3.11",
)
