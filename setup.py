import os
from setuptools import setup, find_packages

version = os.environ.get('RELEASE_VERSION', '99.0.0.dev0')

setup(
    name='gravifon',
    version=version,
    author='Gravifon',
    packages=find_packages(include=['gravifon', 'gravifon.*']),
    description='couchdb document store layer of the gravifon scrobble service.',
    python_requires='>=3.9',
    install_requires=[
        "requests>=2.31",
        "orjson>=3.9",
        "pydantic>=2.5",
        "sentry-sdk>=1.40",
        "click>=8.1",
        "python-dateutil>=2.8",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "requests-mock>=1.11",
        ],
    },
    entry_points={
        'console_scripts': [
            'gravifon-manage=gravifon.manage:cli',
        ],
    },
    zip_safe=False
)
