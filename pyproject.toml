[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "invoicesrv"
version = "0.1.0"
description = "Invoice API for partner-company payments, with commission and tax calculation and encrypted bank details"
requires-python = ">=3.10"
keywords = ["invoice", "billing", "commission", "accounting", "flask", "sqlalchemy"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
    "Topic :: Office/Business :: Financial :: Accounting",
]
dependencies = [
    "flask>=2.3",
    "sqlalchemy>=2.0",
    "cryptography>=41",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
]

[project.scripts]
invoicesrv-initdata = "invoicesrv.initdata:main"

[tool.hatch.build.targets.wheel]
packages = ["invoicesrv"]

[tool.pytest.ini_options]
addopts = "-ra"
