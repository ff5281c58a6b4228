# Copyright (c) 2023, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from basketsvc import run_main

if __name__ == "__main__":
    run_main()
