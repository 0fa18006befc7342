# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Release configuration: YAML file → frozen pydantic model."""
