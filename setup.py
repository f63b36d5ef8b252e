from setuptools import setup, find_packages


def parse_requirements(path='requirements.txt'):
    with open(path) as file:
        requirements = [line.strip() for line in file.readlines()]
    return [line for line in requirements if line and not line.startswith('#')]


if __name__ == '__main__':
    setup(
        name='blobpath',
        version='1.0',
        author='AI Forever',
        description='Path-oriented async wrapper over blob storage backends',
        package_dir={'': '.'},
        packages=find_packages('.', include=['blobpath', 'blobpath.*']),
        python_requires='>=3.10',
        install_requires=parse_requirements(),
        extras_require={'test': parse_requirements('requirements-test.txt')},
        entry_points={'console_scripts': ['blobpath=blobpath.cli:run']}
    )
