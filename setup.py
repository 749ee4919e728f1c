"""
Setup configuration for the table_unify data unification library.
Use this for:
- Creating a Distributable Package
- Installing into another project that reads or writes tables

If you're just setting up another development environment, consider using `pip install -e .[dev]` instead.

For Distributable Package:
- python setup.py sdist bdist_wheel
    (Creates installable .whl files in dist/ folder)
"""

from setuptools import setup, find_packages
from pathlib import Path

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

# Separate main requirements from development and optional requirements
main_requirements = []
dev_requirements = []
optional_requirements = []

for req in requirements:
    if any(dev_pkg in req for dev_pkg in ["pytest", "black", "flake8", "mypy"]):
        dev_requirements.append(req)
    elif "# Optional:" in req:
        optional_requirements.append(req.split("#", 1)[0].strip())
    else:
        main_requirements.append(req.split("#", 1)[0].strip())

setup(
    name="table_unify",
    version="1.0.0",
    author="Table Unify Team",
    description="Typed in-memory tables populated from and written to CSV, JSON, XML, SQL, REST and document stores.",
    long_description=Path("README.md").read_text(encoding="utf-8"),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.8",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Database",
        "Topic :: Text Processing :: Markup :: XML",
    ],
    python_requires=">=3.8",
    install_requires=main_requirements,
    extras_require={
        "dev": dev_requirements,
        "optional": optional_requirements,
    },
)
