import os.path
from setuptools import setup, find_packages

HERE = os.path.abspath(os.path.dirname(__file__))

# The text of the README file
with open(os.path.join(HERE, "README.rst")) as fid:
    README = fid.read()


setup(
    name="ssi-helpers",
    version="0.1.0",
    description="Proof request and connection helpers for apps built on hosted SSI agents.",
    long_description=README,
    long_description_content_type="text/x-rst",
    license="Apache License",
    classifiers=[
        "License :: OSI Approved :: Apache Software License",
        'Intended Audience :: Developers',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Operating System :: POSIX',
        'Operating System :: MacOS :: MacOS X',
        'Operating System :: Microsoft :: Windows',
    ],
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.8',
    include_package_data=True,
    install_requires=[
        'aiohttp>=3.8',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
            'pytest-asyncio>=0.20',
        ]
    }
)
