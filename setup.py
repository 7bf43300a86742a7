from setuptools import setup, find_packages

setup(
    name="pool-league-forecaster",
    version="0.1.0",
    description="Strength estimation, season simulation, lineup optimization and cross-league calibration for amateur pool leagues",
    author="Ben Rosen",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy>=1.22.4",
        "pandas>=1.5.3",
        "scipy>=1.10.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    python_requires=">=3.8",
)
