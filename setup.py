from setuptools import setup, find_packages

setup(
    name="portfolio-rebalancer",
    version="1.0.0",
    author="Portfolio Rebalancer Team",
    description="Multi-account allocation engine with whole-share rounding and trade generation",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={
        "portfolio_base": ["py.typed"],
        "allocation_engine": ["py.typed"],
    },
    install_requires=[
        "pydantic==2.11.7",
        "PyYAML==6.0.2",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "portfolio-rebalance=rebalancer_cli.main:main",
        ],
    },
    python_requires=">=3.11",
)
