from setuptools import find_packages, setup

setup(
    name="cue-maker",
    version="0.1.0",
    packages=find_packages(include=["cue_maker", "cue_maker.*"]),
    install_requires=[
        "click>=8.0.0",
        "rich>=12.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=22.0.0",
            "isort>=5.10.0",
            "mypy>=1.0.0",
            "pylint>=2.15.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "cue-maker=cue_maker.cli.main:main",
        ],
    },
    description="Make cue sheets from track files and audio editor labels from cue sheets",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    keywords="cue, cue sheet, audacity, labels, ffprobe",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Topic :: Multimedia :: Sound/Audio :: Conversion",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
    ],
    python_requires=">=3.8",
)
