from pathlib import Path

import setuptools

this_directory = Path(__file__).parent
long_description = (this_directory / "README.rst").read_text()

test_dependencies = ["pytest"]


setuptools.setup(
    name="displaced-points",
    version="1.0.0",
    description="Point displacement for map visualizations: co-located points are spread on a ring around their "
    "centroid.",
    long_description=long_description,
    long_description_content_type="text/x-rst",
    packages=["displaced_points"],
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: MIT License",
        "Operating System :: Unix",
        "Operating System :: MacOS",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
    keywords="map cartography point displacement clustering overlap gis",
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.18",
        "scipy",
        "scikit-learn",
        "pandas",
        "typer",
        "shapely>=2.0",
        "geopandas",
    ],
    test_suite="pytest",
    tests_require=test_dependencies,
    extras_require={"test": test_dependencies},
    entry_points={
        "console_scripts": ["displaced-points=displaced_points.cli:run"],
    },
)
