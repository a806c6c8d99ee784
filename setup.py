#!/usr/bin/env python

from setuptools import setup

with open("README.md", "r") as fh:
    long_description = fh.read()

setup(
    name="cashier",
    version="1.0.0",
    description="Validate Apple App Store receipts with the verifyReceipt service",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    keywords="iap appstore receipt django",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=["cashier"],
    package_dir={"cashier": "cashier"},
    python_requires=">=3.6",
    install_requires=[
        "Django>=2.2",
        "pytz",
        "requests",
    ],
    extras_require={"test": ["pytest>=7", "pytest-django", "responses", "flake8"]},
    tests_require=["cashier[test]"],
)
