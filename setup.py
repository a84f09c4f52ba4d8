# setup.py
from setuptools import setup, find_packages

setup(
    name="ollacoder",
    version="0.1.0",
    description="A CLI coding assistant for local Ollama models, with the chatjson library for resilient decoding of structured model output.",
    author="Your Name or Team",
    author_email="your_email@example.com",
    # two top-level packages: the assistant and the decoding library it uses
    packages=find_packages(include=['ollacoder', 'ollacoder.*', 'chatjson', 'chatjson.*']),
    include_package_data=True,
    package_data={
        'ollacoder': ['templates/*.j2'],
    },
    install_requires=[
        "click>=8.0",
        "pyyaml",
        "jinja2",
        "rich",
        "httpx",
    ],
    extras_require={
        'test': [
            "pytest",
            "anyio",
        ],
    },
    entry_points={
        'console_scripts': [
            'ollacoder = ollacoder.cli:cli',
        ],
    },
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Code Generators",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
