from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="copilot_assistant",
    version="0.1.0",
    description="Session-aware client for turn-based assistants APIs (threads, runs, messages)",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["copilot_assistant", "copilot_assistant.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    install_requires=[
        "httpx",
        "pydantic>=2",
        "python-dotenv",
        "tenacity",
    ],
    extras_require={
        "dev": [
            "pytest",
        ],
    },
)
