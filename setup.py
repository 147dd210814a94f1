"""Setup configuration for community_metrics"""

from setuptools import setup, find_packages

setup(
    name="community-health-metrics",
    version="0.1.0",
    description=(
        "CLI tool for GitHub organization community health metrics: pull request "
        "and issue time to close, weekly activity, contributors and adopters."
    ),
    author="Community Health Metrics Contributors",
    author_email="",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "requests>=2.28.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
            "types-PyYAML",
            "types-requests",
        ],
    },
    entry_points={
        "console_scripts": [
            "community-metrics=community_metrics.main:main",
        ],
    },
)
