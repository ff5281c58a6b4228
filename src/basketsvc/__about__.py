# Directly modelled on Donald Stufft's readme_renderer code:
# https://github.com/pypa/readme_renderer/blob/master/readme_renderer/__about__.py

__all__ = [
    "__title__",
    "__summary__",
    "__version__",
    "__author__",
    "__email__",
    "__license__",
    "__copyright__",
]

__title__ = "Basket Service"
__summary__ = "Per-user shopping basket microservice."

__version__ = "1.0.0"

__author__ = "Eric Lemoine"
__email__ = "erik.lemoine@gmail.com"

__license__ = "BSD 3-Clause"
__copyright__ = f"Copyright 2023 {__author__}"
