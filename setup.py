from setuptools import setup, find_packages

setup(
    name="mjcf-scene-sdk",
    version="0.1.0",
    description="MJCF robot description -> transform hierarchy compiler",
    package_dir={"": "src"},
    packages=find_packages("src"),
    include_package_data=True,
    package_data={"mjcf_scene": ["resources/configs/*.yaml"]},
    python_requires=">=3.9",
    install_requires=["numpy>=1.21", "pyyaml>=6.0", "trimesh>=4.0"],
    extras_require={
        "test": ["pytest"],
        "dev": ["pytest", "black", "ruff"],
    },
)
