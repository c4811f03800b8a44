from setuptools import setup, find_packages

setup(
    name="sudoku-session",
    version="1.0.0",
    description="Sudoku Play Session Core: Board, Notes, Undo & Command Queue",
    author="robomotic",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.21.0",
        "matplotlib>=3.5.0",
        "seaborn>=0.11.0",
    ],
    extras_require={
        "dev": ["pytest>=7.0.0"],
    },
    entry_points={
        "console_scripts": [
            "sudoku-session=sudoku_session.cli:main",
        ],
    },
)
