#!/usr/bin/env python
#
# Setup prog for inframanager
#
#
release_version='1.0.0'

import sys

from setuptools import setup

# Python version check.
if sys.version_info < (3, 6):
    print("inframanager requires Python >= 3.6. Exitting.")
    sys.exit(1)

# ===========================================================
#                D A T A     F I L E S
# ===========================================================

etc_files = ['etc/inframanager.conf-example',
             'etc/infrastructures.conf-example',
             ]

data_files = [('etc/inframanager', etc_files),
             ]

# ===========================================================

setup(
    name="inframanager",
    version=release_version,
    description='inframanager package',
    long_description='''Sessions and job services for grid and cloud infrastructures''',
    license='Apache-2.0',
    packages=['inframanager',
              'inframanager.plugins',
              'inframanager.plugins.session',
              'inframanager.plugins.jobservice',
              ],
    scripts = [ # main script
               'bin/infra-session',
              ],
    install_requires=['htcondor'],
    extras_require={'test': ['pytest']},

    data_files = data_files
)
