from setuptools import setup, find_packages

setup(
    name='apisync',
    version='0.1.0',
    packages=find_packages(include=['apisync', 'apisync.*']),
    entry_points={
        'console_scripts': [
            'apisync=apisync.cli:main',
        ],
    },
    install_requires=[
        'python-dotenv',
        'pyyaml',
        'requests',
        'click',
        'pydantic>=2',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    author='While True Industries',
    author_email='adam@whiletrue.industries',
    description='Sync module OpenAPI documents into Postman collections',
    python_requires='>=3.10',
)
