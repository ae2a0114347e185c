# setup.py
from setuptools import setup, find_packages

setup(
    name="sqlab",
    version="0.1.0",
    description="Query console backend for SQLab adventures: answer-check query rewriting and paginated browsing",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.8",
    install_requires=[
        "sqlalchemy>=2.0",
        "pandas",
        "pydantic",
        "fastapi",
        "uvicorn",
        "python-dotenv",
        "pyyaml",
        "sqlparse",
        "pymysql",
        "requests",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
)
