import setuptools

with open("readme.md", "r") as fh:
    long_description = fh.read()

with open('requirements.txt') as f:
    requirements = f.read().splitlines()

setuptools.setup(
    name="cliptube",
    version="1.0.0",
    description="Social catalog of clipped video segments, playlists, tags and bookmarks",
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=8.0"],
    },
    packages=setuptools.find_packages(include=["cliptube", "cliptube.*"]),
    include_package_data=True,
    zip_safe=False,
    long_description=long_description,
    long_description_content_type="text/markdown",
    python_requires='>=3.11',
)
