# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Infrastructure layer: adapters that implement application ports.

This layer bridges the application's port interfaces to concrete
external dependencies (Docker SDK, configuration files, local files).
"""
