# setup.py
from setuptools import setup, find_packages

install_requires = [
    # --- CONFIG & VALIDATION ---
    "pydantic>=2.0.0",
    "python-dotenv>=1.0.0",
    "pyyaml>=6.0.0",
]

extras_require = {
    # --- TESTS---
    "test": [
        "pytest",
    ],
}

setup(
    name="atomic-store",
    version="0.1.0",
    description="Per-key reactive cells from a single state description",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires=">=3.10",
)
