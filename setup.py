from setuptools import setup

version = '0.1'
setup(
  name = 'kwcount',
  packages = ['kwcount'],
  version = version,
  description = 'Parallel keyword counting over the lines of a text file',
  python_requires = '>=3.8',
  extras_require = {'test': ['pytest']},
  entry_points = {'console_scripts': ['kwcount = kwcount.cli:main_exit']},
  keywords = ['multiprocessing', 'threading', 'pipeline', 'keywords', 'count'],
  classifiers = [],
)
