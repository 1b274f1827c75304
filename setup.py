import os
import setuptools


with open(os.path.join(
        os.path.dirname(__file__), 'wavltree', '_version.py')) as f:
    for line in f:
        if line.startswith('__version__ ='):
            _, _, version = line.partition('=')
            VERSION = version.strip(" \n'\"")
            break
    else:
        raise RuntimeError(
            'unable to read the version from wavltree/_version.py')


setuptools.setup(
    version=VERSION,
)
