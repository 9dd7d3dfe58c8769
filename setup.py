import os.path
import sys

from setuptools import setup, find_packages

# find absolute path of working directory
try:
    filename = __file__
except NameError:
    filename = sys.argv[0]
filename = os.path.abspath(filename)
if os.path.dirname(filename):
    src_abspath = os.path.dirname(filename)
else:
    raise ValueError("Cannot determine working directory!")


with open(os.path.join(src_abspath, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

setup(
    name='mglda',
    version='0.1.0',
    description='Multi-Grain LDA topic model fitted by collapsed Gibbs sampling',
    packages=find_packages('./python/', exclude=['tests', 'tests.*']),
    package_dir={'': './python/'},
    python_requires='>=3.7',
    install_requires=['numpy', 'scipy', 'pandas', 'tqdm', 'packaging'],
    extras_require={'test': ['pytest']},
    entry_points={
        'console_scripts': [
            'mglda-holdout=mglda.cli:holdout_main',
            'mglda-learn=mglda.cli:learn_main',
            'mglda-convert=mglda.cli:convert_main',
        ],
    },

    long_description_content_type='text/markdown',
    long_description=long_description,
)
