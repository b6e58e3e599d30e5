from setuptools import setup, find_packages

setup(
    name='graph-undo-redo',
    version='1.0.0',
    description='Reversible command engine for hierarchical graph documents',
    packages=find_packages(include=['graph_api', 'graph_api.*', 'graph_undo_redo', 'graph_undo_redo.*']),
    install_requires=[],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    python_requires='>=3.8',
)
