from setuptools import setup, find_packages

setup(
    name='lepmap',
    version='0.1.0',
    description='Occurrence density and elevation report for butterfly records',
    author='Matthew Whittle',
    author_email='matthewjwhittle@gmail.com',
    packages=find_packages(include=['lepmap', 'lepmap.*']),
    python_requires='>=3.11',
    install_requires=[
        'numpy',
        'pandas',
        'geopandas>=1.0',
        'shapely>=2.0',
        'xarray',
        'rioxarray',
        'rasterio',
        'affine<3',
        'scipy',
        'matplotlib',
        'requests',
        'tqdm',
        'typer',
        'typing_extensions',
        'pyyaml',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'lepmap=lepmap.cli:app',
        ],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
)
