from setuptools import find_packages, setup
from pathlib import Path

def parse_requirements(filename):
    return [line.strip() for line in Path(filename).read_text().splitlines()
            if line.strip() and not line.startswith("#")]

setup(
    name="preloader",
    version="1.0.0",
    description="Opcode cache preload manifest builder and loader for PHP applications",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=parse_requirements("requirements.txt"),
    extras_require={"dev": parse_requirements("requirements-test.txt")},
    entry_points={"console_scripts": ["preloader=preloader.__main__:main"]},
)
