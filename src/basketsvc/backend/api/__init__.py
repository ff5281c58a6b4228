# Copyright (c) 2023, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from .api_v1.basket import BasketModel, basket
from .command import CommandResponse, CommandStatus
