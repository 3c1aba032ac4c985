#!/usr/bin/env python3
"""Render the gateway collector config for a destinations manifest.

Usage: render_gateway_config.py MANIFEST.yaml [OPERATOR.yaml]

No cluster is contacted. Sizing uses defaults; the operator config only
selects strict or permissive validation and the log level.
"""

import sys

from otelsync import ConfigurationError, SynthesisError, load_config, load_manifest, synthesize
from otelsync._internal.logging import configure_logging
from otelsync.api.types import GatewaySettings
from otelsync.gateway import memory_limiter_config, memory_settings


def main(argv: list[str]) -> int:
    if len(argv) not in (2, 3):
        print(__doc__.strip().splitlines()[2], file=sys.stderr)
        return 2

    strict = False
    configure_logging("INFO")
    try:
        if len(argv) == 3:
            operator_config = load_config(argv[2])
            configure_logging(operator_config.logging.level)
            strict = operator_config.is_strict
        destinations, processors = load_manifest(argv[1])
        config = synthesize(
            destinations,
            processors,
            memory_limiter=memory_limiter_config(memory_settings(GatewaySettings())),
            strict=strict,
        )
    except (ConfigurationError, SynthesisError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    sys.stdout.write(config.to_yaml())
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
