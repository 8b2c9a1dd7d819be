#!/usr/bin/env python
"""
Copyright 2025 Hathor Labs

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

   http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import re
from pathlib import Path

from setuptools import find_packages, setup

# the package can't be imported before its dependencies are installed
version_source = (Path(__file__).parent / 'minser' / 'version.py').read_text()
version = re.search(r"^BASE_VERSION = '([^']+)'", version_source, re.MULTILINE).group(1)

setup(
    name='minser',
    version=version,
    description='Minimal serializer to a compact textual format, decoded by sandboxed evaluation',
    author='Hathor Team',
    author_email='contact@hathor.network',
    url='https://hathor.network/',
    license='Apache-2.0',
    python_requires='>=3.11',
    entry_points={
        'console_scripts': ['minser-cli=minser.cli.main:main'],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'License :: OSI Approved :: Apache Software License',
    ],
    packages=find_packages(exclude=('tests', 'tests.*')),
    install_requires=[
        'structlog>=22.3',
        'pydantic>=2.0',
        'PyYAML>=6.0',
        'typing_extensions>=4.10',
        'ConfigArgParse>=1.5',
        'colorama>=0.4',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
)
