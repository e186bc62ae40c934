from setuptools import setup, find_packages


def load_requirements(filename):
    with open(filename) as f:
        lines = f.read().splitlines()
    return lines


reqs = load_requirements('requirements.txt')
extras_require = {
    'tests': load_requirements('requirements-testing.txt'),
}

setup(name='seisgeom',
      version='0.1.0',
      description="Seismic acquisition geometry for wave-equation imaging.",
      long_description="""
      seisgeom describes the positions and timing of the sources and receivers
      of seismic shots, either fully in memory or as a lightweight summary of
      large SEG-Y archives read on demand. It provides the validation of time
      axes and coordinates, shot subsampling, comparison, concatenation and
      simultaneous-source (super-shot) merging used by inversion workflows.""",
      platforms=["Linux", "Mac OS-X", "Unix"],
      python_requires=">=3.9",
      classifiers=[
          'Development Status :: 4 - Beta',
          'Intended Audience :: Science/Research',
          'License :: OSI Approved :: MIT License',
          'Operating System :: MacOS',
          'Operating System :: POSIX :: Linux',
          'Operating System :: Unix',
          'Programming Language :: Python',
          'Programming Language :: Python :: 3',
          'Programming Language :: Python :: 3 :: Only',
          'Topic :: Scientific/Engineering',
          'Topic :: Scientific/Engineering :: Physics'],
      test_suite='pytest',
      license='MIT',
      packages=find_packages(exclude=['docs', 'tests', 'tests.*']),
      install_requires=reqs,
      extras_require=extras_require)
