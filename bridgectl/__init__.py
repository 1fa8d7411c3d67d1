# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""bridgectl - Move the Docker bridge onto a chosen subnet and prove it works."""

__version__ = "0.1.0"
