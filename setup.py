from setuptools import setup

setup(
    name='impactplot',
    version='0.1.0',
    description='Tabular extraction and layered charts for causal-impact model output',
    packages=['impactplot', 'impactplot.core', 'impactplot.charts'],
    package_dir={'impactplot': 'impactplot_py'},
    python_requires='>=3.8',
    install_requires=['numpy>=1.21', 'pandas>=1.3', 'matplotlib>=3.5'],
    extras_require={'test': ['pytest>=7.0']},
    zip_safe=False,
)
