from setuptools import setup, find_packages

setup(
    name='scopedstorage',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    version='0.1',
    description='Global and workspace scoped key-value storage on a flat string store',
    keywords=['storage', 'key-value', 'workspace', 'settings'],
    classifiers=['Development Status :: 3 - Alpha',
                 'Intended Audience :: Developers',
                 'Topic :: Software Development :: Libraries',
                 'Programming Language :: Python :: 3'],
    python_requires='>=3.10',
    install_requires=['rich', 'blinker', 'docopt'],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        "console_scripts": ['scopedstorage = scopedstorage.cli:run_scopedstorage']
    }
)
