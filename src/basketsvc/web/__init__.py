# Copyright (c) 2023, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from .app import create_app
from .auth import AuthenticationError, Identity, JwtTokenVerifier, TokenVerifier

__all__ = [
    "create_app",
    "AuthenticationError",
    "Identity",
    "JwtTokenVerifier",
    "TokenVerifier",
]
