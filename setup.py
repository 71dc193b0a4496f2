import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()


exec(open('version.py').read())
release = __version__
version = '.'.join(release.split('.')[:2])


setuptools.setup(
    name="amrmerge",
    version=release,
    description="Packrat AMR reader and semantic graph consolidation",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_namespace_packages(include=["codec", "grammar", "validate"]),
    py_modules=["graph", "analyzer", "corpus", "mentions", "consolidate", 'main', 'version'],
    install_requires=[
        'numpy',
    ],
    extras_require={
        'test': ['pytest', 'hypothesis'],
    },
    entry_points = {
        'console_scripts': ['amrmerge=main:main'],
    },
    classifiers=[
        "Environment :: Console",
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
        "Topic :: Text Processing :: Linguistic"
    ]
)
