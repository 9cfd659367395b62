from pathlib import Path

from setuptools import find_packages, setup

test_requires = [
    'pytest'
]

setup(
    name='ram-workbench',
    version='0.1.0',
    license='Affero',
    packages=find_packages(exclude=('tests',)),
    description='Inspect a RAM kit from a live USB: memory identity,'
                ' stability test and throughput benchmark, all logged.',
    python_requires='>=3.6',
    long_description=Path('README.md').read_text(),
    long_description_content_type='text/markdown',
    install_requires=[
        'colorama',
        'click >= 7.0',
        'inflection',
        'python-decouple'
    ],
    extras_require={
        'test': test_requires,
    },
    tests_require=test_requires,
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: Information Technology',
        'Intended Audience :: System Administrators',
        'License :: OSI Approved :: GNU Affero General Public License v3',
        'Operating System :: POSIX :: Linux',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: System :: Hardware',
        'Topic :: System :: Logging',
        'Topic :: Utilities',
    ],
    entry_points={
        'console_scripts': [
            'ramwb = ram_workbench.ramwb:ramwb',
        ],
    },
)
