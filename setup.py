from setuptools import setup, find_packages

from os import path
this_directory = path.abspath(path.dirname(__file__))
with open(path.join(this_directory, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

setup(
    name='bcp47_python',
    version='1.0.0',
    description='Parses, validates, normalizes and matches BCP-47 language tags.',
    long_description_content_type='text/markdown',
    long_description=long_description,
    license='GNU GPL',
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={'bcp47_python': ['data/*.txt', 'data/*.csv', 'logging.toml']},
    include_package_data=True,
    python_requires='>=3.10',
    install_requires=open('requirements.txt').readlines(),
    extras_require={'test': ['pytest']},
    entry_points={
        'console_scripts': ['bcp47_python=bcp47_python.__main__:main'],
    },
)
