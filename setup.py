"""
Packaging script for PyPI.
"""
import setuptools

setuptools.setup(
	name='stratagem-lang',
	version='0.1.0',
	packages=['stratagem'],
	license='MIT',
	description='A small gradually-typed expression language: type lattice, cast insertion, and a tree-walking evaluator',
	long_description=open('README.md').read(),
	long_description_content_type="text/markdown",
	classifiers=[
		"Programming Language :: Python :: 3.12",
		"License :: OSI Approved :: MIT License",
		"Operating System :: OS Independent",
		"Development Status :: 3 - Alpha",
		"Intended Audience :: Developers",
		"Intended Audience :: Education",
		"Topic :: Software Development :: Interpreters",
		"Topic :: Software Development :: Compilers",
		"Topic :: Education",
	],
	python_requires='>=3.11',
	install_requires=[
		"booze-tools>=0.6.2.1",
	],
)
