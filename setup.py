from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="campusconnect",
    version="0.1.0",
    author="CampusConnect Team",
    author_email="hello@campusconnect.example.com",
    description="Pre-launch waitlist landing page with an admin broadcast dashboard, built on Flask",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/campusconnect/campusconnect",
    packages=find_packages(include=["campusconnect", "campusconnect.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Framework :: Flask",
    ],
    python_requires=">=3.9",
    install_requires=[
        "Flask>=3.0.0",
        "Flask-CORS>=4.0.0",
        "python-dotenv>=1.0.0",
        "requests>=2.28.0",
        "resend>=0.7.0",
    ],
    extras_require={
        "ses": [
            "boto3>=1.26",
        ],
        "dev": [
            "pytest>=7.0",
            "pytest-flask>=1.3",
            "black>=22.0",
            "flake8>=5.0",
        ],
    },
    include_package_data=True,
    package_data={
        "campusconnect": [
            "templates/**/*.html",
            "modules/*/templates/**/*.html",
        ],
    },
    zip_safe=False,
)
