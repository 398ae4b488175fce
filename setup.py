from setuptools import find_packages, setup

setup(
    name="orderpay",
    version="0.1.0",
    packages=find_packages(exclude=["orderpay.tests"]),
    python_requires=">=3.10",
    install_requires=[
        "sqlalchemy>=2.0",
        "click>=8.1",
        "python-dotenv",
        "pandas"
    ],
    extras_require={"dev": ["pytest"]},
    entry_points={
        "console_scripts": [
            "orderpay=orderpay.cli.main:cli"
        ]
    },
)
