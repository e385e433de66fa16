from setuptools import setup, find_packages

setup(
    name="wro-route-planner",
    version="1.0.0",
    description="WRO mission planner route calculator and compiler",
    packages=find_packages(include=["wro", "wro.*"]),
    py_modules=["main", "doctor"],
    include_package_data=True,
    install_requires=[
        "pygame>=2.1.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.8",
)
