"""
Setup script for zk-trap-grid package with Cython compilation.

This builds the internal modules (_*.py) as compiled extensions,
while keeping the public API (errors.py, types.py, cli.py) as readable
Python source.
"""

from setuptools import setup, find_packages, Extension
import os

# Check if Cython is available
try:
    from Cython.Build import cythonize
    USE_CYTHON = True
except ImportError:
    USE_CYTHON = False
    print("Cython not found. Building without compilation (source only).")

# Internal modules to compile with Cython
CYTHON_MODULES = [
    "src/trap_grid/_commitment/merkle.py",
    "src/trap_grid/_commitment/field.py",
    "src/trap_grid/_proof/codec.py",
    "src/trap_grid/_session/repo_moves.py",
    "src/trap_grid/_session/repo_sessions.py",
]


def get_extensions():
    """Build Extension objects for Cython compilation."""
    if not USE_CYTHON:
        return []

    extensions = []
    for module_path in CYTHON_MODULES:
        if os.path.exists(module_path):
            # Convert path to module name: src/trap_grid/_proof/codec.py -> trap_grid._proof.codec
            module_name = module_path.replace("src/", "").replace("/", ".").replace(".py", "")
            extensions.append(
                Extension(
                    name=module_name,
                    sources=[module_path],
                )
            )
    return extensions


def get_ext_modules():
    """Get extension modules, cythonized if Cython is available."""
    extensions = get_extensions()
    if not extensions:
        return []

    return cythonize(
        extensions,
        compiler_directives={
            "language_level": "3",
            "boundscheck": False,
            "wraparound": False,
        },
        nthreads=os.cpu_count() or 1,
    )


# Only add ext_modules if we have Cython
ext_modules = get_ext_modules() if USE_CYTHON else []

setup(
    name="zk-trap-grid",
    version="1.0.0",
    description="Zero-knowledge trap grid - grid commitments, proof plumbing and verified game sessions",
    author="Trap Grid Developers",
    license="MIT",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    ext_modules=ext_modules,
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
        "py_ecc>=6.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
        "dev": [
            "pytest>=7.0",
            "cython>=3.0",
            "build",
            "wheel",
        ],
    },
    entry_points={
        "console_scripts": [
            "trap-grid=trap_grid.cli:main",
        ],
    },
    # Include the schema and compiled .so/.pyd files in the package
    package_data={
        "trap_grid": ["*.so", "*.pyd"],
        "trap_grid._session": ["schema.sql"],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Cython",
    ],
)
