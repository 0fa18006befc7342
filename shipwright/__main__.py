# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

from shipwright.cli.main import main

main()
