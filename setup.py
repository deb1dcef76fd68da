from setuptools import setup, find_packages


setup(
    name="arstream",
    version="0.1",
    packages=find_packages(include=["arstream", "arstream.*"]),
    description="Sequential reader and writer for Unix ar archives (the .deb container format).",
    python_requires=">=3.8",
    install_requires=[],
)
