#!/usr/bin/env python

import os
from setuptools import setup

def read(fname):
    with open(os.path.join(os.path.dirname(__file__), fname), encoding="utf-8") as readme:
        return readme.read()

setup(
    name='sybasequery',
    version='0.1.0',
    description='Run a single SQL query against Sybase and print the rows as delimited text',
    long_description=read("README"),
    packages=['sybasequery'],
    python_requires='>=3.7',
    install_requires=[
        'msgpack>=1.0',
        'pyodbc>=4.0',
        'python-dotenv>=0.19',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'sybase-query=sybasequery.cli:main_base64',
            'sybase-query-stdin=sybasequery.cli:main_stdin',
        ],
    },
)
