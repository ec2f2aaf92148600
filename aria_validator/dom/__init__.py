# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
DOM helpers: attribute/property reading, element location and window handles.
"""
