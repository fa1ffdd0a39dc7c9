from setuptools import setup, find_packages

setup(
    name="zkverifier_package",
    version="0.1.0",
    description="A package to generate Groth16 proofs over BN254 and verify them inside a metered execution host",
    url="https://github.com/yourusername/zkverifier_package",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "py_ecc>=7.0.0",
    ],
    extras_require={
        "test": ["pytest>=8.0"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: POSIX",
    ],
    python_requires=">=3.11",
)
