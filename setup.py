#!/usr/bin/env python3


"""
Setup script for tinyreduce
"""


import os

from setuptools import find_packages
from setuptools import setup


with open('README.rst') as f:
    readme = f.read().strip()


with open(os.path.join('tinyreduce', '__init__.py')) as f:
    for line in f:
        if '__version__' in line:
            version = line.split("=")[1].strip()
            version = version.strip('"')
            version = version.strip("'")
            break
    else:
        raise RuntimeError("Could not find '__version__'")


extras_require = {
    'test': [
        'pytest>=3',
        'pytest-cov',
    ],
}


setup(
    name='tinyreduce',
    author="Kevin Wurster",
    author_email="wursterk@gmail.com",
    classifiers=[
        'Intended Audience :: Developers',
        'Development Status :: 3 - Alpha',
        'License :: OSI Approved :: BSD License',
        'Programming Language :: Python :: 3'
    ],
    description="The reduce phase of a MapReduce job, one partition at a "
                "time.",
    include_package_data=True,
    extras_require=extras_require,
    keywords='map reduce mapreduce partition',
    license="New BSD",
    long_description=readme,
    packages=find_packages(exclude=['tests']),
    python_requires='>=3.8',
    version=version,
    zip_safe=True
)
