from setuptools import setup, find_packages
from setuptools.command.install import install



with open('requirements.txt') as f:
    requirements = f.read().splitlines()

#Show a warning if the host is not Linux: getdents64 and fallocate are Linux syscalls
class CustomInstall(install):
     def run(self):
        import platform
        if platform.system() != 'Linux':
            print("copyup_harness targets Linux; the getdents64 and fallocate checks will be skipped on this host.")

        install.run(self)

setup(
    name='copyup_harness',
    version='1.0',
    packages=find_packages(include=['copyup_harness', 'copyup_harness.*']),
    description='A conformance harness checking that overlay filesystems keep inode numbers stable across copy-up',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    python_requires='>=3.11',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'Operating System :: POSIX :: Linux',
        'Topic :: System :: Filesystems',
        'Topic :: Software Development :: Testing'
    ],
    keywords='overlay, filesystem, copy-up, inode, conformance',
    install_requires=requirements,
    extras_require={
        'test': ['pytest', 'refuse'],
    },
    cmdclass={'install':CustomInstall},
    entry_points={
        'console_scripts': [
            'copyup_harness=copyup_harness:cli',
        ],
    },
)
