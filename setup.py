from setuptools import setup, find_packages

setup(
    name="notebook_sync",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pyyaml",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    python_requires=">=3.10",
    description="Keeps notebook cells in sync with a single analyzable document "
                "and maps analyzer findings back onto cells.",
)
