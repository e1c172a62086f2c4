#!/usr/bin/env python3

from setuptools import setup
import hoteldb

setup(
    name='hoteldb',
    description='Interactive console to operate a hotel management database',
    version=hoteldb.__version__,
    platforms='ALL',
    author='Vincent MAILLOL',
    author_email='vincent.maillol@gmail.com',
    keywords='hotel booking console DATABASE SQL',
    license=hoteldb.__license__,
    packages=['hoteldb'],
    python_requires='>=3.6',
    install_requires=[
        'psycopg2-binary',
        'PyMySQL',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'hoteldb = hoteldb.__main__:main',
        ]
    }
)
