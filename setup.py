from setuptools import setup, find_packages

__version__ = '1.0.0'

requirements = [
    'astor==0.8.1',
    'autopep8>=1.5.7',
    'stdlib_list>=0.10.0',
    'coloredlogs>=15.0',
]

test_requirements = [
    'pytest>=7.0',
]

setup(
    name='storyledger',
    version=__version__,
    description='Story token ledger running as a Python smart contract.',
    packages=find_packages(include=['storyledger', 'storyledger.*']),
    install_requires=requirements,
    extras_require={
        'test': test_requirements,
    },
    python_requires='>=3.8',
    classifiers=[
        'Programming Language :: Python :: 3',
    ],
    zip_safe=False,
    package_data={
        'storyledger': ['contracts/*.s.py'],
    },
    include_package_data=True,
)
