from setuptools import setup, find_packages

setup(
    name="appnexus-client",
    version="0.1.0",
    packages=find_packages(include=["appnexus", "appnexus.*"]),
    python_requires=">=3.11",
    install_requires=[
        "httpx>=0.26",
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "respx",
        ],
    },
)
