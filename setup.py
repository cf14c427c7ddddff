from setuptools import setup, find_packages

setup(
    name="hunkwise",
    version="0.3.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    python_requires=">=3.8",
    install_requires=[
        "Pillow",
    ],
    extras_require={
        "test": ["pytest", "pytest-asyncio"],
    },
)
