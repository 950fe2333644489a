import ast
import codecs

from os.path import join, dirname
from setuptools import setup, find_packages

classifiers = [
    'Development Status :: 5 - Production/Stable',
    'Intended Audience :: Developers',
    'License :: OSI Approved :: MIT License',
    'Operating System :: OS Independent',
    'Programming Language :: Python',
    'Programming Language :: Python :: 3',
    'Topic :: Software Development :: Libraries :: Python Modules',
    'Topic :: Text Processing :: Markup :: HTML'
]

here = dirname(__file__)
with codecs.open(join(here, 'README.rst'), 'r', 'utf8') as readme_file:
    with codecs.open(join(here, 'CHANGES.rst'), 'r', 'utf8') as changes_file:
        long_description = readme_file.read() + '\n' + changes_file.read()

version = None
with open(join(here, "htmlscanner", "__init__.py"), "rb") as init_file:
    t = ast.parse(init_file.read(), filename="__init__.py", mode="exec")
    assert isinstance(t, ast.Module)
    assignments = filter(lambda x: isinstance(x, ast.Assign), t.body)
    for a in assignments:
        if (len(a.targets) == 1 and
                isinstance(a.targets[0], ast.Name) and
                a.targets[0].id == "__version__" and
                isinstance(a.value, ast.Constant)):
            version = a.value.value

setup(name='htmlscanner',
      version=version,
      license="MIT License",
      description='Lazy scanner for the elements of possibly malformed HTML',
      long_description=long_description,
      classifiers=classifiers,
      packages=find_packages(exclude=["*.tests", "*.tests.*", "tests.*", "tests"]),
      python_requires=">=3.7",
      install_requires=[
          'webencodings',
      ],
      extras_require={
          "test": ["pytest"],
      },
      )
