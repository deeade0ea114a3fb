from setuptools import find_packages, setup

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="mygpo_api",
    version="0.0.0",
    description="An async client library for the gpodder.net web API.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    packages=find_packages(include=["mygpo_api", "mygpo_api.*"]),
    install_requires=[
        "aiohttp>=3.14",
        "mashumaro",
        "orjson",
        "rich",
        "yarl",
    ],
    extras_require={
        "test": [
            "aresponses",
            "pytest",
            "pytest-asyncio",
        ],
        "docs": [
            "enum-tools[sphinx]",
            "myst-parser",
            "sphinx",
            "sphinx-autodoc-typehints",
            "sphinx-book-theme",
            "sphinx-toolbox",
        ],
    },
    entry_points={
        "console_scripts": [
            "mygpo=mygpo_api.cli.cli:main",
        ],
    },
    classifiers=[
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    python_requires=">=3.11",
)
