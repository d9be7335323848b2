
from setuptools import setup, find_namespace_packages

setup(
    name='websterdict',
    version='0.1',
    description='Converting legacy Webster dictionary dumps into lookup-ready entries',
    author='Thomas Vogt',
    author_email='thomas.vogt@tovotu.de',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)',
        'Programming Language :: Python :: 3',
        'Topic :: Text Processing :: Linguistic',
    ],
    keywords='dictionary webster sql dump lookup',
    packages=find_namespace_packages(include=['websterdict', 'websterdict.*']),
    python_requires='>=3.8',
    install_requires=[
        "pyquery",
        "lxml",
        "pyglossary<5.3",
    ],
    extras_require={
        'test': ["pytest"],
    },
    scripts=["bin/websterdict"],
)
