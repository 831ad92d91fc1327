import setuptools

setuptools.setup(
    name='faithnum',
    version='0.0.0',
    description='exact rational and decimal numbers with JavaScript semantics for NaN, infinities and -0',
    license='MIT',
    install_requires=['numpy>=1.23.0', 'gmpy2>=2.1.2'],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    packages=['faithnum', 'faithnum.core', 'faithnum.arithmetic'],
    python_requires='>=3.8',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Operating System :: POSIX :: Linux',
        'License :: OSI Approved :: MIT License',
    ],
)
