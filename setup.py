from setuptools import setup, find_packages

setup(
    name="fast-sql",
    version="0.1.0",
    description="Automatic multi-row INSERT batching and prepared statement caching for DB-API connections",
    packages=find_packages(include=["fast_sql", "fast_sql.*"]),
    include_package_data=True,
    python_requires=">=3.8",
    install_requires=[
        'click>=8.1.8',
        'mysql-connector-python>=9.1.0',
        'polars>=1.0.0,<2',
        'psycopg2-binary>=2.9.10',
        'rich>=13.9.4',
        'trino>=0.333.0',
    ],
    extras_require={
        'test': [
            'pytest>=8.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'fast-sql=fast_sql.cli:main',
        ],
    },
)
