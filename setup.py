from setuptools import setup, find_packages

setup(
    name="process-timeline",
    version="0.1.0",
    description="Quantity-aware film processing timelines: resolve, schedule and merge recipes",
    author="Analog Agenda",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.10",
    install_requires=[
        "pandas>=2.0.0",
        "pydantic>=2.6.0",
        "pydantic-settings>=2.1.0",
        "streamlit>=1.31.0",
        "plotly>=5.18.0",
        "openpyxl>=3.1.2",
    ],
    extras_require={
        "test": ["pytest>=7.4.0"],
    },
)
