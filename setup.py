from setuptools import setup, find_packages

setup(
    name             = 'chat-exposure',
    version          = '1.0.0',
    description      = 'Chat Exposure — offline privacy exposure analysis for AI-chat history exports',
    packages         = find_packages(exclude=['tests*']),
    install_requires = open('requirements.txt').read().splitlines(),
    extras_require   = {
        'test': ['pytest>=7.0', 'httpx>=0.24'],
    },
    entry_points     = {
        'console_scripts': [
            'exposure     = exposure.cli:main',
            'exposure-api = exposure.api:main',
        ],
    },
    python_requires  = '>=3.10',
    classifiers      = [
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
    ],
)
