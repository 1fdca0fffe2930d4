#!/usr/bin/env python3

"""
Merge Configuration Utilities
-----------------------------
This module contains utility functions for loading and validating the merge
targeting configuration from a JSON file. It utilizes Pydantic for validation,
ensuring the `github` and `merge` sections are present and well-formed before
any request is made to GitHub.

Key functionality:
- Loading the merge configuration from a JSON file
- Validating the configuration using Pydantic
- Exiting the process when the configuration cannot be loaded or validated

Required environment:
- The `target_config_model` module containing the `TargetingConfig` class.
"""

import json
import sys
import logging
from target_config_model import TargetingConfig

logger = logging.getLogger(__name__)

def load_targeting_config(config_path: str) -> TargetingConfig:
    """Load and validate the merge targeting config from JSON using Pydantic."""
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        config = TargetingConfig(**data)
    except Exception as e:
        logger.error(f"Failed to load or validate config file '{config_path}': {e}")
        sys.exit(1)
    logger.debug(f"Loaded merge config for {config.github.full_name} from {config_path}")
    return config
