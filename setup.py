"""
Installation setup for scrydex
"""
import configparser
import pathlib

import setuptools

# Establish project directory
project_root: pathlib.Path = pathlib.Path(__file__).resolve().parent

# Read config details to determine version-ing
config_file = project_root.joinpath("scrydex/resources/scrydex.properties")
config = configparser.ConfigParser()
if config_file.is_file():
    config.read(str(config_file))

setuptools.setup(
    name="scrydex",
    version=config.get("Scrydex", "version", fallback="0.1.0+fallback"),
    description="Streaming JSON card database store for trading card collections",
    long_description=project_root.joinpath("README.md").open(encoding="utf-8").read()
    if project_root.joinpath("README.md").is_file()
    else "",
    long_description_content_type="text/markdown",
    license="MIT",
    python_requires=">=3.9",
    classifiers=[
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python",
        "Topic :: Database",
    ],
    keywords=[
        "Card Games",
        "Collectible",
        "Database",
        "JSON",
        "MTG",
        "Scryfall",
        "Trading Cards",
    ],
    packages=setuptools.find_packages(include=["scrydex", "scrydex.*"]),
    package_data={"scrydex": ["resources/*.properties"]},
    install_requires=project_root.joinpath("requirements.txt")
    .open(encoding="utf-8")
    .read()
    .split()
    if project_root.joinpath("requirements.txt").is_file()
    else [],  # Use the requirements file, if able
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["scrydex=scrydex.__main__:main"]},
)
