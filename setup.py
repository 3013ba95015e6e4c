from setuptools import find_packages, setup

setup(
    name='pyevtc',
    version='0.1.0',
    author='everiToken',
    author_email='help@everiToken.io',
    description='Command line client for everiToken nodes and wallets',
    long_description=open('README.rst').read(),
    license='MIT',
    packages=find_packages(include=['pyevtc', 'pyevtc.*']),
    install_requires=['requests', 'click'],
    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: POSIX :: Linux',
        'Operating System :: MacOS :: MacOS X'
    ],
    entry_points={
        'console_scripts': [
            'evtc = pyevtc.cli:main',
        ]
    },
)
