import ast

from setuptools import setup

with open('src/satwatch/__init__.py') as f:
    docstring = ast.get_docstring(ast.parse(f.read()))

description, long_description = docstring.split('\n', 1)

setup(
    name='satwatch',
    version='0.1.0',
    description=description,
    long_description=long_description,
    long_description_content_type='text',
    license='MIT',
    python_requires='>=3.10',
    install_requires=['pyevspace>=0.0.12.4,<0.15'],
    extras_require={
        'test': ['pytest', 'sgp4>=2.20'],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Environment :: Console',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Topic :: Scientific/Engineering',
        'Topic :: Scientific/Engineering :: Astronomy'
    ],
    packages=['satwatch', 'satwatch.core', 'satwatch.orbit', 'satwatch.batch', 'satwatch.satellitepass',
              'satwatch.util'],
    package_dir={'': 'src'},
)
