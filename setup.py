from setuptools import setup, find_packages

# Basic information
VERSION = '0.1.0'
DESCRIPTION = 'A CLI tool for downloading manga chapters'
LONG_DESCRIPTION = 'This package provides a command-line interface to download manga, manhua and webtoon chapters from various sources.'

# Read from requirements.txt, but filter out comments and empty lines
try:
    with open('requirements.txt', encoding='utf-8') as f:
        install_requires = [line.strip() for line in f if line.strip() and not line.startswith('#')]
except FileNotFoundError:
    install_requires = ['requests', 'beautifulsoup4', 'click']

setup(
    name='manga-archiver',
    version=VERSION,
    author='Manga Archiver Team',
    author_email='maintainers@example.com',
    description=DESCRIPTION,
    long_description=LONG_DESCRIPTION,
    packages=find_packages(include=['manga_archiver', 'manga_archiver.*']),
    install_requires=install_requires,
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'manga-archiver = manga_archiver.cli.main:archiver',
        ],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: End Users/Desktop',
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'Topic :: Utilities',
    ],
    python_requires='>=3.9',
)
