from setuptools import find_packages, setup

# The channel checkout is not a Python project; install this tool into the
# environment used to work on it and run `nonguix-committer` from the checkout.

package_list = find_packages(
  include=[
    "committer",
    "committer.*",
  ]
)

setup(
  name="nonguix-committer",
  version="0.1.0",
  description="Commit unstaged package definition changes one definition at a time",
  python_requires=">=3.11",
  packages=package_list,
  include_package_data=True,
  install_requires=[
    "GitPython>=3.1.27",
    "unidiff>=0.7",
    "pydantic>=2",
    "python-dotenv",
    "pyyaml",
    "platformdirs",
  ],
  extras_require={
    "dev": ["pytest", "pytest-cov"],
  },
  entry_points={
    "console_scripts": [
      "nonguix-committer = committer.cli:main",
    ],
  },
)
