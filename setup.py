# setup.py
from setuptools import find_packages, setup

setup(
    name="driver-locator",
    version="0.1.0",
    packages=find_packages(include=["app", "app.*"]),
    python_requires=">=3.10",
    install_requires=[
        "fastapi>=0.110",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "structlog>=24.1",
        "sentry-sdk>=1.40",
        "uvicorn>=0.27",
        "httpx>=0.26",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    include_package_data=True,
)
