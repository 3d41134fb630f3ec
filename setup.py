"""
Wheel build for reaction-diffusion-drift.

Metadata and dependencies live in pyproject.toml. This file only narrows
what build_py collects: the wheel ships the numpy simulation core, while
the pygame window (viewer.py) and the command line that launches it
(__main__.py) stay in the source checkout.
"""

from setuptools import setup
from setuptools.command.build_py import build_py


WINDOW_ONLY_MODULES = ("viewer", "__main__")


class CoreOnlyBuildPy(build_py):
    """build_py that skips the interactive window modules."""

    def find_package_modules(self, package, package_dir):
        found = super().find_package_modules(package, package_dir)
        return [entry for entry in found if entry[1] not in WINDOW_ONLY_MODULES]


setup(cmdclass={"build_py": CoreOnlyBuildPy})
