from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="superterminal",
    version="0.1.0",
    description="Convert natural language to shell commands using the OpenAI API",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Environment :: Console",
        "Topic :: Utilities",
    ],
    python_requires=">=3.8",
    install_requires=[
        "openai>=1.0.0",
        "rich>=12.0.0",
        "python-dotenv>=0.21.0",
        "pyperclip>=1.8.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "superterminal=superterminal.main:main",
        ],
    },
)
