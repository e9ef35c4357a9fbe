"""Install ci-webhooks."""

import re

from setuptools import find_packages, setup


def read_requirements(path):
    """
    The package requirements in a pip requirements file.

    Blank lines, comments, options like -r and -e, and URLs are skipped.
    """
    with open(path) as reqs:
        lines = (line.strip() for line in reqs)
        return [line for line in lines if line and not line.startswith(("#", "-", "git+"))]


with open("ci_webhooks/__init__.py") as init_py:
    match = re.search(r'^__version__\s*=\s*[\'"]([^\'"]+)[\'"]', init_py.read(), re.MULTILINE)
if match is None:
    raise RuntimeError("No __version__ in ci_webhooks/__init__.py")

with open("README.rst") as readme:
    long_description = readme.read()


setup(
    name="ci_webhooks",
    version=match.group(1),
    description="Pull request label and slash command automation for CI workflows",
    long_description=long_description,
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "ci_webhooks": ["data/*.yaml", "templates/*.j2"],
    },
    install_requires=read_requirements("requirements.txt"),
    extras_require={
        "test": read_requirements("requirements/test.txt"),
    },
    python_requires=">=3.10",
    license="Apache 2.0",
    classifiers=[
        "License :: OSI Approved :: Apache Software License",
        "Framework :: Flask",
        "Programming Language :: Python :: 3",
    ],
    zip_safe=False,
)
