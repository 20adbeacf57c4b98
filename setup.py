"""Install the CAS OAuth2 authorization bridge."""

from setuptools import setup, find_packages

setup(
    name='casoauth',
    version='0.1.0',
    packages=find_packages(exclude=['*tests*']),
    package_data={'casoauth': ['templates/casoauth/*.html']},
    py_modules=['wsgi'],
    install_requires=[
        "flask",
        "werkzeug",
        "flask-sqlalchemy",
        "sqlalchemy",
        "redis",
        "fakeredis",
        "authlib",
        "click",
        "python-json-logger",
    ],
    extras_require={
        'test': ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'casoauth-create-client=casoauth.create_client:create_client',
        ],
    },
    zip_safe=False
)
