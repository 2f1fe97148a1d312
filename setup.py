from setuptools import setup, find_packages

setup(
    name="voice2text",
    version="0.1.0",
    description="Speech to text, text to speech and document scanning in the terminal",
    author="",
    python_requires=">=3.8",
    packages=find_packages(include=["voice2text", "voice2text.*"]),
    install_requires=[
        "pyaudio>=0.2.11",
        "numpy>=1.21.0",
        "google-cloud-speech>=2.16.0",
        "google-auth>=2.10.0",
        "rich>=12.5.0",
        "pyyaml>=6.0.0",
        "pypubsub>=4.0.3",
        "pyttsx3>=2.90",
        "pytesseract>=0.3.10",
        "Pillow>=9.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "voice2text=voice2text.main:main",
        ],
    },
)
