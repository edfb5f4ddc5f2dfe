from setuptools import setup, find_packages

setup(
    name="spheron-deployer",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"app": ["static/*"]},
    include_package_data=True,
    install_requires=[
        "fastapi==0.115.6",
        "uvicorn==0.32.1",
        "sqlalchemy==2.0.36",
        "alembic==1.14.0",
        "pydantic==2.10.4",
        "pydantic-settings==2.7.0",
        "python-dotenv==1.0.1",
        "psycopg2-binary==2.9.10",
        "requests==2.32.3",
    ],
    extras_require={
        "test": [
            "pytest==8.3.4",
            "httpx==0.28.1",
        ],
    },
    python_requires=">=3.11",
)
