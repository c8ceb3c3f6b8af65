#!/usr/bin/env python3

import os
from typing import Dict, Any, List, Optional


def load_config(argv: Optional[List[str]] = None) -> Dict[str, Any]:
    """
    Loads configuration from environment variables.

    Args:
        argv: Command line arguments, forwarded to git blame

    Returns:
        Dict containing configuration values
    """
    verbose = os.environ.get("BLAMEDIFF_VERBOSE", "false").strip().lower() == "true"

    config = {
        # git configuration
        "git": os.environ.get("BLAMEDIFF_GIT", "git"),
        "revision": os.environ.get("BLAMEDIFF_REVISION", "HEAD"),
        "extra_args": list(argv or []),

        # Annotation configuration
        "side": os.environ.get("BLAMEDIFF_SIDE", "src").strip().lower(),
        "verbose": verbose,
    }

    return config
