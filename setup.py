#!/usr/bin/env python3
from __future__ import annotations

import re
import setuptools
import pathlib
import sys

__minver__ = '3.8'
__github__ = 'https://github.com/stringsutil/stringsutil/'
__gitraw__ = 'https://raw.githubusercontent.com/stringsutil/stringsutil/'
__author__ = 'stringsutil contributors'
__slogan__ = 'Print the string constants of Java class files, directories and (nested) archives.'
__topics__ = [
    'Development Status :: 4 - Beta',
    'Operating System :: OS Independent',
    'Programming Language :: Python :: 3 :: Only',
    'Programming Language :: Java',
    'Topic :: Software Development :: Disassemblers',
    'Topic :: System :: Archiving',
]


class DeployCommand(setuptools.Command):
    description = 'Tag and push new release.'
    user_options = []

    def initialize_options(self):
        pass

    def finalize_options(self):
        pass

    @staticmethod
    def main():
        import subprocess
        import shlex
        import os

        def run(cmd):
            print(F'run: {cmd}')
            with open(os.devnull, 'wb') as devnull:
                return subprocess.check_call(
                    shlex.split(cmd),
                    stdout=devnull,
                    stderr=devnull,
                    cwd=os.getcwd(),
                )

        os.chdir(pathlib.Path(__file__).parent)
        version = get_package_info()['version']

        try:
            run(F'git tag {version}')
            run(R'git push')
            run(R'git push --tags')
        except subprocess.CalledProcessError as E:
            print(F'error: {E!s}')
            return 1
        else:
            return 0

    def run(self):
        sys.exit(self.main())


def get_package_info() -> dict[str, str]:
    """
    Read the version and distribution name from the package without importing it, because its
    dependencies are not necessarily installed when the package is being built.
    """
    init = pathlib.Path(__file__).parent.joinpath('stringsutil', '__init__.py')
    code = init.read_text(encoding='UTF8')
    return {
        key: re.search(RF'^__{key}__\s*=\s*[\'"]([^\'"]+)[\'"]', code, flags=re.MULTILINE)[1]
        for key in ('version', 'distribution')
    }


def get_config():

    def get_setup_readme(filename: str | pathlib.Path | None = None):
        if filename is None:
            filename = pathlib.Path(__file__).parent.joinpath('README.md')
        with open(filename, 'r', encoding='UTF8') as README:
            def complete_link(match):
                link: str = match[1]
                if any(link.lower().endswith(xt) for xt in ('jpg', 'gif', 'png', 'svg')):
                    return F'({__gitraw__}master/{link})'
                else:
                    return F'({__github__}blob/master/{link})'
            readme = README.read()
            return re.sub(R'(?<=\])\((?!\w+://)(.*?)\)', complete_link, readme)

    info = get_package_info()

    config = dict(
        name=info['distribution'],
        version=info['version'],
        long_description=get_setup_readme(),
        author=__author__,
        description=__slogan__,
        long_description_content_type='text/markdown',
        url=__github__,
        python_requires=F'>={__minver__}',
        classifiers=__topics__,
        packages=setuptools.find_packages(include=('stringsutil*',)),
        install_requires=['colorama>=0.4.6'],
        extras_require={
            'test': ['pytest'],
            'dev': ['flake8'],
        },
        entry_points={'console_scripts': ['stringsutil=stringsutil.cli:main']},
        cmdclass={'deploy': DeployCommand},
    )

    return config


if __name__ == '__main__':
    setuptools.setup(**get_config())
