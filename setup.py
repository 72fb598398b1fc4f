"""
Setup file.
"""

from setuptools import setup

URL = "https://github.com/godotino/godotino"
KEYWORDS = "embedded arduino go transpiler arduino-cli compiler firmware microcontroller"


if __name__ == "__main__":
    setup(
        keywords=KEYWORDS,
        url=URL,
    )
