from setuptools import setup, find_packages

setup(
    name="awsu",
    version="0.1.0",
    description="AWS CLI shortcuts and developer tool bootstrap for Ubuntu workstations",
    packages=find_packages(include=["awsu", "awsu.*"]),
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "typer>=0.9",
        "rich>=13",
        "pydantic>=2",
        "boto3",
        "botocore",
        "PyYAML",
        "requests",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "awsu=awsu.cli:main",
        ],
    },
)
