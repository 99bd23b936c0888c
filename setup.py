# setup.py
from setuptools import setup, find_packages

setup(
    name="custodycompass",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dateutil",
        "icalendar",
        "matplotlib",
        "reportlab",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "custodycompass=custodycompass.main:run_wizard",
        ],
    },
)
