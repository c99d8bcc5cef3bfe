from setuptools import setup

setup(
    name="source_theory",
    version="0.1.0",
    packages=["source_theory", "source_theory.scripts"],
    python_requires=">=3.11",
    install_requires=[
        "numpy",
        "pandas",
        "scipy",
        "typer",
    ],
    extras_require={
        "test": [
            "hypothesis",
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "source-theory-spectra=source_theory.scripts.compute_spectra:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
