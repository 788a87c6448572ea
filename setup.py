from setuptools import setup, find_packages

setup(
    name="siphashcore",
    version="0.1.0",
    description="SipHash digest state machine in pure Python: keyed 64-bit PRF with caller-chosen round counts and an optional numba-compiled SipRound.",
    long_description=open("Readme.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    include_package_data=True,
    install_requires=[],
    extras_require={
        "native": ["numba", "numpy"],
        "test": ["pytest"],
    },
    python_requires=">=3.8",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    zip_safe=False,
)
