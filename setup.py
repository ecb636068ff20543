from setuptools import find_packages, setup

with open('requirements.txt', 'r') as file:
    requirements = file.readlines()

extra_require = {
    'speedups': [
        'orjson'
    ],
    'test': [
        'pytest'
    ]
}

packages = find_packages(include=['httpacket', 'httpacket.*'])

setup(
    name='httpacket',
    version='0.1.0',
    packages=packages,
    python_requires='>=3.8.0',
    install_requires=requirements,
    extras_require=extra_require,
    entry_points={
        'console_scripts': [
            'httpacket = httpacket.__main__:main'
        ]
    },
)
