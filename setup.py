"""Install the peluqueria dashboard package."""

from setuptools import setup, find_packages

setup(
    name='peluqueria-admin',
    version='0.1.0',
    packages=find_packages(include=['peluqueria', 'peluqueria.*']),
    package_data={'peluqueria': ['templates/peluqueria/*.html']},
    include_package_data=True,
    python_requires='>=3.8',
    install_requires=[
        "flask",
        "wtforms",
        "email-validator",
        "requests",
        "retry",
        "pyjwt",
        "redis",
        "fakeredis",
        "cryptography",
        "pydantic>=2.5",
        "python-json-logger>=3.1",
    ],
    extras_require={
        'test': [
            "pytest",
            "hypothesis",
        ]
    },
    zip_safe=False
)
