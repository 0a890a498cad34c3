from setuptools import setup, find_packages
import pathlib

# Detect layout
use_src = pathlib.Path("src/gauqchem").exists()
pkg_args = {"package_dir": {"": "src"}, "packages": find_packages(where="src")} if use_src \
           else {"packages": find_packages(where=".")}

setup(
    name="gauqchem",
    version="0.1.0",
    description="Gaussian External= bridge to Q-Chem",
    python_requires=">=3.8",
    include_package_data=True,
    package_data={"gauqchem": ["templates/qchem/*.j2"]},
    install_requires=[
        "numpy",
        "jinja2",
        "pyyaml",
        "pydantic>=2",
        "typer",
    ],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["gauqchem=gauqchem.cli:app"]},
    **pkg_args
)
