import os
from setuptools import setup, find_packages

SETUP_DIR = os.path.dirname(os.path.realpath(__file__))
README_PATH = os.path.join(SETUP_DIR, "README.md")

with open(README_PATH, "r") as readme:
    README = readme.read()

setup(
    name="gem-deps",
    description="An evaluator for Gemfile and gem.deps.rb dependency files",
    long_description=README,
    long_description_content_type="text/markdown",
    license="LGPL-3.0-or-later",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=[
        "graphviz>=0.14.1",
        "pydantic>=2.0",
        "pydantic-settings>=2.3",
        "semantic_version~=2.8",
    ],
    extras_require={
        "dev": ["flake8", "pytest", "mypy>=0.812"]
    },
    entry_points={
        "console_scripts": [
            "gem-deps = gem_deps._cli:main"
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU Lesser General Public License v3 or later (LGPLv3+)",
        "Programming Language :: Python :: 3 :: Only",
        "Topic :: Software Development :: Build Tools",
        "Topic :: Utilities"
    ]
)
