import os

from setuptools import find_packages, setup

# Read the README
with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

# Read version from __version__.py
version = {}
with open(os.path.join("pinecone_otel", "__version__.py"), "r", encoding="utf-8") as f:
    exec(f.read(), version)

setup(
    name="pinecone-otel-instrument",
    version=version["__version__"],
    packages=find_packages(exclude=["tests", "tests.*", "docs"]),
    include_package_data=True,
    install_requires=[
        "opentelemetry-api>=1.20.0,<2.0.0",
        "opentelemetry-sdk>=1.20.0,<2.0.0",
        "opentelemetry-instrumentation>=0.41b0",
        "opentelemetry-exporter-otlp-proto-http>=1.20.0,<2.0.0",
        "opentelemetry-semantic-conventions>=0.58b0,<1.0.0",
        "wrapt>=1.14.0",
        "pinecone>=5.1.0",
    ],
    # Optional dependencies
    extras_require={
        # Record/replay of Pinecone HTTP traffic
        "recording": ["vcrpy>=5.1.0"],
        "test": [
            "vcrpy>=5.1.0",
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "pytest-asyncio>=0.21.0",
        ],
        # Development dependencies
        "dev": [
            "vcrpy>=5.1.0",
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "pytest-asyncio>=0.21.0",
            "black>=23.0.0",
            "isort>=5.12.0",
            "pylint>=2.17.0",
            "mypy>=1.0.0",
            "build>=0.10.0",
            "twine>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pinecone-instrument=pinecone_otel.cli:main",
        ],
    },
    # Metadata
    description="OpenTelemetry tracing for Pinecone vector database clients",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="Apache-2.0",
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: System :: Monitoring",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords="opentelemetry observability pinecone vector-database instrumentation tracing",
    zip_safe=False,
)
