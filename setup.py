"""setup.py for packaging docker-retag"""
from setuptools import setup, find_packages
from docker_retag.version import get_version


REQUIREMENTS_PATH = 'docker_retag/requirements.txt'
TEST_REQUIREMENTS_PATH = 'docker_retag/requirements-test.txt'


def read_requirements(path):
    """Read requirements.txt and return a list of requirements."""
    with open(path, 'r') as file:
        reqs = file.read().splitlines()
    return [req for req in reqs if req and not req.startswith('#')]

def read_long_description():
    """Read a file written about long description of the package."""
    with open("README.md", "r") as file:
        long_description = file.read()
    return long_description


setup(
    name="docker-retag",
    version=get_version(),
    description="Retag a container image in a remote registry without pulling it",
    keywords=['docker', 'registry', 'retag', 'system tools'],
    long_description=read_long_description(),
    long_description_content_type="text/markdown",

    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: System Administrators",
        "Topic :: System :: Software Distribution",
        "Topic :: System :: Systems Administration",
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
        "Operating System :: OS Independent",
    ],

    install_requires=read_requirements(REQUIREMENTS_PATH),
    extras_require={
        'test': read_requirements(TEST_REQUIREMENTS_PATH),
    },
    python_requires='>=3.7',

    packages=find_packages(include=["docker_retag", "docker_retag.*"]),
    package_data={'docker_retag': ['requirements*.txt']},
    entry_points={
        "console_scripts": [
            "docker-retag = docker_retag.__main__:main",
        ]
    },
)
