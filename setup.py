from setuptools import setup, find_packages

setup(
    name="danielsson",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*", "utils"]),
    py_modules=["danielsson_distance_map"],
    install_requires=[
        "torch>=1.9.0",
        "matplotlib",
        "numpy",
        "pillow",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "danielsson-distance-map=danielsson_distance_map:run",
        ],
    },
    description="Danielsson's four-pass vector propagation distance transform for binary images",
    keywords="distance transform, distance map, image processing, danielsson",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Image Processing",
    ],
    python_requires=">=3.8",
)
