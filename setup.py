from setuptools import setup, find_packages

__version__ = '1.0.0'

requirements = [
    'coloredlogs',
    'sanic',
]

test_requirements = [
    'pytest',
    'sanic-testing',
]

setup(
    name='nftregistry',
    version=__version__,
    description='Non-fungible token registry running on a transactional Python contract runtime.',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=requirements,
    extras_require={
        'test': test_requirements,
    },
    python_requires='>=3.8',
    classifiers=[
        'Programming Language :: Python :: 3',
    ],
    zip_safe=True,
    include_package_data=True,
)
