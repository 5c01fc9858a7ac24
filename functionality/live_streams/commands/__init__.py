from __future__ import annotations

"""Command registration package for LiveScout.

Exposes a single `register_commands(client, shared)` that sets up all commands
using separate modules. `/rank` is only registered when ranks are configured.
"""

from typing import List

import lightbulb

from .common import SharedContext


def register_commands(client: lightbulb.Client, shared: SharedContext) -> List[str]:
    """Register all LiveScout commands on a Lightbulb client and return names."""
    from .help import register as reg_help
    from .streams import register as reg_streams
    from .rank import register as reg_rank

    names: List[str] = []
    names.append(reg_help(client, shared))
    names.append(reg_streams(client, shared))
    if shared.config.ranks:
        names.append(reg_rank(client, shared))
    return names
