"""
LitPDF - Lightweight PDF Structure Parser
pip install -e . 또는 python setup.py install
"""

from setuptools import setup, find_packages
from pathlib import Path

readme = Path(__file__).parent / "README.md"
long_description = readme.read_text(encoding='utf-8') if readme.exists() else ""

setup(
    name="litpdf",
    version="0.2.0",
    description="Lightweight PDF Structure Parser - 순수 Python으로 PDF 객체 그래프, 페이지, 폰트, 텍스트 추출",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",

    packages=find_packages(include=['litpdf', 'litpdf.*']),

    python_requires=">=3.8",
    install_requires=[],

    extras_require={
        'dev': ['pytest>=7.0', 'pytest-cov>=4.0'],
    },

    entry_points={
        'console_scripts': [
            'litpdf=litpdf.__main__:main',
        ],
    },

    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Text Processing",
    ],

    keywords="pdf parser lexer cmap text extraction lightweight",
)
