from setuptools import setup, find_packages


setup(name="edgethin",
      version="1.0.0",
      description="Gradient based edge detection, non-maximal suppression edge thinning, and Canny edge detection",
      packages=find_packages(include=["edgethin", "edgethin.*"]),
      python_requires=">=3.10",
      install_requires=["numpy",
                        "scipy",
                        "opencv-python"],
      extras_require={"test": ["pytest"]})
