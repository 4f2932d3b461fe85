# dtmf-codec/setup.py

from setuptools import setup, find_packages

setup(
    name="dtmf_codec",
    version="1.0.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    package_data={"dtmf_codec": ["config/*.yml"]},
    install_requires=[
        "numpy>=1.22",
        "fastapi>=0.100.0",
        "uvicorn>=0.23.0",
        "websockets>=11.0",
        "pydantic>=2.0",
        "PyYAML>=6.0",
        "python-multipart>=0.0.9",
        "structlog>=23.1.0",
        "python-json-logger>=3.1.0"
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
            "httpx>=0.24"
        ]
    },
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "dtmf-codec=dtmf_codec.cli:main",
            "dtmf-codec-api=dtmf_codec.api.__main__:main"
        ]
    },
    description="Fixed-point DTMF tone detector and generator with REST and WebSocket API",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Topic :: Multimedia :: Sound/Audio :: Analysis",
    ],
)
